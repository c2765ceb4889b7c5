"""Tests for container wiring and configuration."""

from pathlib import Path

import pytest

from weight_tracker.adapters.file_store import JsonFileKeyValueStore
from weight_tracker.config import Settings
from weight_tracker.containers import build_container, build_store
from weight_tracker.services.storage import InMemoryKeyValueStore


def test_build_container_creates_services(settings: Settings) -> None:
    container = build_container(settings)

    assert isinstance(container.store, InMemoryKeyValueStore)
    assert container.record_repository.key == "test-records"
    assert container.submission_service.edit_session is container.edit_session
    assert container.chart_view.height == 300
    container.close_resources()


def test_build_container_loads_existing_records(settings: Settings) -> None:
    store = InMemoryKeyValueStore(
        {"test-records": '[{"date": "2024-01-01", "weight": "70"}]'}
    )

    container = build_container(settings, store=store)

    assert container.record_repository.find("2024-01-01") is not None


def test_build_store_file_backend(tmp_path: Path) -> None:
    settings = Settings(
        storage_backend="file", storage_path=str(tmp_path / "records.json")
    )

    store = build_store(settings)

    assert isinstance(store, JsonFileKeyValueStore)
    assert store.path == tmp_path / "records.json"


def test_build_store_supabase_requires_credentials() -> None:
    settings = Settings(storage_backend="supabase")

    with pytest.raises(ValueError, match="SUPABASE_URL"):
        build_store(settings)


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    monkeypatch.setenv("CHART_HEIGHT", "420")

    settings = Settings()

    assert settings.storage_backend == "memory"
    assert settings.chart_height == 420
    assert settings.storage_key == "weightRecords"
