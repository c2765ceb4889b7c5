"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from weight_tracker.config import Settings
from weight_tracker.containers import AppContainer, build_container
from weight_tracker.domain.errors import StorageError
from weight_tracker.services.records import RecordRepository
from weight_tracker.services.storage import InMemoryKeyValueStore, KeyValueStore


@dataclass
class FailingKeyValueStore(KeyValueStore):
    """Store whose writes always fail, as when storage quota is exceeded."""

    values: dict[str, str] = field(default_factory=dict)
    attempts: int = 0

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.attempts += 1
        raise StorageError("quota exceeded")


@dataclass
class FakeUpload:
    """Stand-in for an uploaded file."""

    content: bytes = b"\x89PNG\r\n\x1a\nfake-png"
    content_type: str | None = "image/png"
    error: Exception | None = None

    async def read(self) -> bytes:
        if self.error is not None:
            raise self.error
        return self.content


@pytest.fixture
def settings() -> Settings:
    return Settings(
        storage_backend="memory",
        storage_key="test-records",
        chart_width=600,
        chart_height=300,
        chart_resize_debounce_seconds=0.01,
    )


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def repository(store: InMemoryKeyValueStore) -> RecordRepository:
    return RecordRepository.load(store, key="test-records")


@pytest.fixture
def container(settings: Settings, store: InMemoryKeyValueStore) -> AppContainer:
    return build_container(settings, store=store)
