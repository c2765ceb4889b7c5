"""Durable key-value store abstractions."""

from dataclasses import dataclass
from typing import Protocol


class KeyValueStore(Protocol):
    """Durable store holding one serialized blob per key."""

    def get(self, key: str) -> str | None:
        """Return the stored value, if present."""

    def set(self, key: str, value: str) -> None:
        """Store a value, raising StorageError when the write fails."""


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """In-memory store for local runs and tests."""

    _values: dict[str, str]

    def __init__(self, values: dict[str, str] | None = None) -> None:
        self._values = dict(values or {})

    def get(self, key: str) -> str | None:
        """Return the stored value for a key."""
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        """Store a value under a key."""
        self._values[key] = value
