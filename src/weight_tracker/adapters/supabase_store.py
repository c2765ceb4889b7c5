"""Supabase-backed key-value store."""

from dataclasses import dataclass
from datetime import UTC, datetime

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from weight_tracker.domain.errors import StorageError
from weight_tracker.services.storage import KeyValueStore


@dataclass
class SupabaseKeyValueStore(KeyValueStore):
    """Supabase implementation storing one row per key."""

    client: Client
    table: str = "kv_store"

    def get(self, key: str) -> str | None:
        """Return the stored value for a key."""
        response = (
            self.client.table(self.table)
            .select("value")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0].get("value")

    def set(self, key: str, value: str) -> None:
        """Upsert the value for a key."""
        try:
            self.client.table(self.table).upsert(
                {
                    "key": key,
                    "value": value,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="key",
            ).execute()
        except (APIError, httpx.HTTPError) as exc:
            raise StorageError(f"Failed to store {key!r} in Supabase") from exc
