"""JSON-file-backed key-value store."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from weight_tracker.domain.errors import StorageError
from weight_tracker.services.storage import KeyValueStore

logger = logging.getLogger(__name__)


@dataclass
class JsonFileKeyValueStore(KeyValueStore):
    """Stores all keys in one JSON object file, rewritten on every write."""

    path: Path

    def get(self, key: str) -> str | None:
        """Return the stored value for a key."""
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        """Store a value, replacing the file atomically."""
        values = self._read_all()
        values[key] = value
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(values, ensure_ascii=False), "utf-8")
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise StorageError(f"Failed to write {self.path}: {exc}") from exc

    def _read_all(self) -> dict[str, object]:
        try:
            raw = self.path.read_text("utf-8")
        except FileNotFoundError:
            return {}
        except OSError:
            logger.exception("Failed to read %s", self.path)
            return {}
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring corrupt store file %s", self.path)
            return {}
        return payload if isinstance(payload, dict) else {}
