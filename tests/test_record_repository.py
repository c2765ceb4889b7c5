"""Tests for the record repository."""

import json

import pytest

from weight_tracker.domain.errors import DuplicateDateError
from weight_tracker.services.records import (
    RecordRepository,
    decode_records,
    encode_records,
)
from weight_tracker.services.storage import InMemoryKeyValueStore
from tests.conftest import FailingKeyValueStore

PHOTO = "data:image/png;base64,AAAA"
NEW_PHOTO = "data:image/jpeg;base64,BBBB"


def test_upsert_then_find_returns_weight(repository: RecordRepository) -> None:
    outcome = repository.upsert("2024-01-01", "70.2")

    record = repository.find("2024-01-01")
    assert record is not None
    assert record.weight == "70.2"
    assert outcome.created
    assert outcome.persisted


def test_add_mode_merges_same_date(repository: RecordRepository) -> None:
    repository.upsert("2024-01-01", "70", photo=PHOTO)

    outcome = repository.upsert("2024-01-01", "69.5")

    assert not outcome.created
    assert len(repository.all()) == 1
    record = repository.find("2024-01-01")
    assert record is not None
    assert record.weight == "69.5"
    assert record.image_data_url == PHOTO


def test_add_mode_replaces_photo_when_supplied(repository: RecordRepository) -> None:
    repository.upsert("2024-01-01", "70", photo=PHOTO)

    repository.upsert("2024-01-01", "70", photo=NEW_PHOTO)

    record = repository.find("2024-01-01")
    assert record is not None
    assert record.image_data_url == NEW_PHOTO


def test_edit_renames_record_and_keeps_photo(repository: RecordRepository) -> None:
    repository.upsert("2024-01-01", "70", photo=PHOTO)

    repository.upsert("2024-01-02", "71", editing_key="2024-01-01")

    assert repository.find("2024-01-01") is None
    record = repository.find("2024-01-02")
    assert record is not None
    assert record.weight == "71"
    assert record.image_data_url == PHOTO
    assert len(repository.all()) == 1


def test_edit_onto_existing_date_fails_without_changes(
    store: InMemoryKeyValueStore,
) -> None:
    repository = RecordRepository.load(store, key="records")
    repository.upsert("2024-01-01", "70")
    repository.upsert("2024-01-02", "71", photo=PHOTO)
    before = repository.all()
    blob_before = store.get("records")

    with pytest.raises(DuplicateDateError):
        repository.upsert("2024-01-02", "65", editing_key="2024-01-01")

    assert repository.all() == before
    assert store.get("records") == blob_before


def test_edit_keeping_same_date_updates_weight(repository: RecordRepository) -> None:
    repository.upsert("2024-01-01", "70")

    outcome = repository.upsert("2024-01-01", "68", editing_key="2024-01-01")

    assert not outcome.created
    record = repository.find("2024-01-01")
    assert record is not None
    assert record.weight == "68"


def test_upsert_persists_full_collection(store: InMemoryKeyValueStore) -> None:
    repository = RecordRepository.load(store, key="records")
    repository.upsert("2024-01-01", "70", photo=PHOTO)
    repository.upsert("2024-01-02", "69")

    blob = store.get("records")
    assert blob is not None
    assert json.loads(blob) == [
        {"date": "2024-01-01", "weight": "70", "imageDataUrl": PHOTO},
        {"date": "2024-01-02", "weight": "69", "imageDataUrl": None},
    ]


def test_storage_failure_keeps_memory_state() -> None:
    store = FailingKeyValueStore()
    repository = RecordRepository.load(store, key="records")

    outcome = repository.upsert("2024-01-01", "70")

    assert not outcome.persisted
    assert store.attempts == 1
    assert repository.find("2024-01-01") is not None


def test_load_restores_persisted_records(store: InMemoryKeyValueStore) -> None:
    first = RecordRepository.load(store, key="records")
    first.upsert("2024-01-01", "70", photo=PHOTO)
    first.upsert("2024-01-03", "abc")

    second = RecordRepository.load(store, key="records")

    assert second.all() == first.all()


def test_load_tolerates_corrupt_blob() -> None:
    store = InMemoryKeyValueStore({"records": "{not json"})

    repository = RecordRepository.load(store, key="records")

    assert repository.all() == []


def test_decode_skips_malformed_and_duplicate_entries() -> None:
    blob = json.dumps(
        [
            {"date": "2024-01-01", "weight": "70", "imageDataUrl": None},
            {"date": "2024-01-01", "weight": "99", "imageDataUrl": None},
            {"weight": "70"},
            "junk",
            {"date": "2024-01-02", "weight": 68.5},
        ]
    )

    records = decode_records(blob)

    assert [(r.date.raw, r.weight) for r in records] == [
        ("2024-01-01", "70"),
        ("2024-01-02", "68.5"),
    ]


def test_decode_non_list_payload_is_empty() -> None:
    assert decode_records(json.dumps({"date": "2024-01-01"})) == []


def test_encode_decode_preserves_fields(repository: RecordRepository) -> None:
    repository.upsert("2024-02-10", "72.4", photo=PHOTO)
    repository.upsert("bad-date", "70")

    decoded = decode_records(encode_records(repository.all()))

    assert decoded == repository.all()
    assert [r.image_data_url for r in decoded] == [PHOTO, None]


def test_subscribers_notified_after_mutation(repository: RecordRepository) -> None:
    calls: list[int] = []
    unsubscribe = repository.subscribe(lambda: calls.append(len(repository.all())))

    repository.upsert("2024-01-01", "70")
    unsubscribe()
    repository.upsert("2024-01-02", "70")

    assert calls == [1]


def test_all_returns_snapshot(repository: RecordRepository) -> None:
    repository.upsert("2024-01-01", "70")

    snapshot = repository.all()
    snapshot.clear()

    assert len(repository.all()) == 1


def test_edit_with_new_photo_replaces_photo(repository: RecordRepository) -> None:
    repository.upsert("2024-01-01", "70", photo=PHOTO)

    repository.upsert("2024-01-02", "71", photo=NEW_PHOTO, editing_key="2024-01-01")

    record = repository.find("2024-01-02")
    assert record is not None
    assert record.image_data_url == NEW_PHOTO
    assert len(repository.all()) == 1


def test_edit_of_missing_record_changes_nothing_but_persists() -> None:
    store = InMemoryKeyValueStore({"records": "[]"})
    repository = RecordRepository.load(store, key="records")
    repository.upsert("2024-01-01", "70")
    before = repository.all()
    store.set("records", "stale")

    outcome = repository.upsert("2024-01-05", "65", editing_key="2024-01-03")

    assert outcome.record is None
    assert not outcome.created
    assert outcome.persisted
    assert repository.all() == before
    assert store.get("records") == encode_records(before)
