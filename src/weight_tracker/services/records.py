"""Record repository with durable mirroring."""

import json
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace

from weight_tracker.domain.errors import DuplicateDateError, StorageError
from weight_tracker.domain.records import CalendarDate, WeightRecord
from weight_tracker.services.storage import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "weightRecords"

RecordListener = Callable[[], None]


@dataclass(frozen=True)
class UpsertOutcome:
    """Result of a successful upsert."""

    record: WeightRecord | None
    created: bool
    storage_error: StorageError | None = None

    @property
    def persisted(self) -> bool:
        """Return True when the durable write succeeded."""
        return self.storage_error is None


@dataclass
class RecordRepository:
    """Authoritative in-memory record collection mirrored to a durable store."""

    store: KeyValueStore
    key: str = DEFAULT_STORAGE_KEY
    _records: list[WeightRecord] = field(default_factory=list)
    _listeners: list[RecordListener] = field(default_factory=list)

    @classmethod
    def load(
        cls, store: KeyValueStore, key: str = DEFAULT_STORAGE_KEY
    ) -> "RecordRepository":
        """Create a repository from the blob stored under ``key``."""
        blob = store.get(key)
        records = decode_records(blob) if blob is not None else []
        logger.info("Loaded %d weight records", len(records))
        return cls(store=store, key=key, _records=records)

    def all(self) -> list[WeightRecord]:
        """Return a snapshot of all records in insertion order."""
        return list(self._records)

    def find(self, date: str | CalendarDate) -> WeightRecord | None:
        """Return the record for a date, if present."""
        index = self._index_of(_as_date(date))
        if index is None:
            return None
        return self._records[index]

    def upsert(
        self,
        date: str | CalendarDate,
        weight: str,
        photo: str | None = None,
        editing_key: str | CalendarDate | None = None,
    ) -> UpsertOutcome:
        """Insert or update a record and mirror the collection to storage.

        In edit mode the record at ``editing_key`` is moved to ``date``;
        renaming onto another record's date raises DuplicateDateError and
        leaves everything untouched. Without ``editing_key`` a record with the
        same date is merged in place. A photo is only replaced when one is
        supplied.
        """
        target_date = _as_date(date)
        if editing_key is not None:
            source_date = _as_date(editing_key)
            if target_date != source_date and self._index_of(target_date) is not None:
                raise DuplicateDateError(target_date.raw)
            index = self._index_of(source_date)
            if index is None:
                logger.warning("Edited record %s no longer exists", source_date)
                record = None
            else:
                record = self._update_at(index, target_date, weight, photo)
            created = False
        else:
            index = self._index_of(target_date)
            if index is None:
                record = WeightRecord(
                    date=target_date, weight=weight, image_data_url=photo
                )
                self._records.append(record)
                created = True
            else:
                record = self._update_at(index, target_date, weight, photo)
                created = False

        storage_error = self._persist()
        self._notify()
        return UpsertOutcome(
            record=record, created=created, storage_error=storage_error
        )

    def subscribe(self, listener: RecordListener) -> Callable[[], None]:
        """Register a change listener and return a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _update_at(
        self, index: int, date: CalendarDate, weight: str, photo: str | None
    ) -> WeightRecord:
        current = self._records[index]
        updated = replace(
            current,
            date=date,
            weight=weight,
            image_data_url=photo if photo else current.image_data_url,
        )
        self._records[index] = updated
        return updated

    def _index_of(self, date: CalendarDate) -> int | None:
        for index, record in enumerate(self._records):
            if record.date == date:
                return index
        return None

    def _persist(self) -> StorageError | None:
        try:
            self.store.set(self.key, encode_records(self._records))
        except StorageError as exc:
            logger.warning("Failed to persist weight records: %s", exc)
            return exc
        return None

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()


def encode_records(records: Iterable[WeightRecord]) -> str:
    """Serialize records into the persisted JSON layout."""
    return json.dumps(
        [
            {
                "date": record.date.raw,
                "weight": record.weight,
                "imageDataUrl": record.image_data_url,
            }
            for record in records
        ],
        ensure_ascii=False,
    )


def decode_records(blob: str) -> list[WeightRecord]:
    """Parse a persisted blob, skipping anything malformed."""
    try:
        payload = json.loads(blob)
    except json.JSONDecodeError:
        logger.warning("Stored weight records are not valid JSON; starting empty")
        return []
    if not isinstance(payload, list):
        logger.warning("Stored weight records are not a list; starting empty")
        return []

    records: list[WeightRecord] = []
    seen: set[CalendarDate] = set()
    for entry in payload:
        record = _decode_entry(entry)
        if record is None:
            logger.warning("Skipping malformed stored record: %r", entry)
            continue
        if record.date in seen:
            logger.warning("Skipping duplicate stored record for %s", record.date)
            continue
        seen.add(record.date)
        records.append(record)
    return records


def _decode_entry(entry: object) -> WeightRecord | None:
    if not isinstance(entry, dict):
        return None
    raw_date = entry.get("date")
    weight = entry.get("weight")
    image = entry.get("imageDataUrl")
    if not isinstance(raw_date, str) or not raw_date:
        return None
    if isinstance(weight, int | float) and not isinstance(weight, bool):
        weight = str(weight)
    if not isinstance(weight, str):
        return None
    if image is not None and not isinstance(image, str):
        return None
    return WeightRecord(
        date=CalendarDate(raw_date), weight=weight, image_data_url=image or None
    )


def _as_date(value: str | CalendarDate) -> CalendarDate:
    if isinstance(value, CalendarDate):
        return value
    return CalendarDate(value)
