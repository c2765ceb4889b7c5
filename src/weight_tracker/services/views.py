"""Read-only projections over the record repository."""

from collections.abc import Iterable

from weight_tracker.domain.records import WeightRecord


def records_by_date_descending(records: Iterable[WeightRecord]) -> list[WeightRecord]:
    """Return records ordered newest first."""
    return sorted(records, key=lambda record: record.date.sort_key, reverse=True)


def photos_by_date_descending(records: Iterable[WeightRecord]) -> list[WeightRecord]:
    """Return records with a photo, ordered newest first."""
    return records_by_date_descending(record for record in records if record.has_photo)
