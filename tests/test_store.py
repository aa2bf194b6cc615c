from datetime import datetime

import pytest
from pydantic import ValidationError

from dicom_insight.schemas.file import FileRecordCreate, FileRecordUpdate


def _fields(name="scan.dcm", size=10):
    return FileRecordCreate(
        original_name=name,
        stored_name="abc.dcm",
        stored_path="/tmp/abc.dcm",
        byte_size=size,
    )


def test_create_assigns_id_and_timestamp(store):
    record = store.create(_fields())

    assert record.id
    assert isinstance(record.uploaded_at, datetime)
    assert record.uploaded_at.tzinfo is not None
    assert record.processed is False
    assert record.linked_result_id is None
    assert store.get(record.id) == record
    assert len(store) == 1


def test_ids_are_unique(store):
    ids = {store.create(_fields()).id for _ in range(50)}
    assert len(ids) == 50


def test_get_unknown_returns_none(store):
    assert store.get("missing") is None


def test_update_merges_only_set_fields(store):
    record = store.create(_fields())

    updated = store.update(record.id, FileRecordUpdate(linked_result_id="other"))

    assert updated.linked_result_id == "other"
    # processed was not passed, so the stored value is kept
    assert updated.processed is False
    assert updated.original_name == record.original_name
    assert updated.uploaded_at == record.uploaded_at
    assert store.get(record.id) == updated


def test_update_is_last_write_wins(store):
    record = store.create(_fields())

    store.update(record.id, FileRecordUpdate(processed=True, linked_result_id="first"))
    store.update(record.id, FileRecordUpdate(linked_result_id="second"))

    current = store.get(record.id)
    assert current.processed is True
    assert current.linked_result_id == "second"


def test_update_unknown_returns_none(store):
    assert store.update("missing", FileRecordUpdate(processed=True)) is None
    assert len(store) == 0


def test_update_does_not_touch_returned_copies(store):
    record = store.create(_fields())
    store.update(record.id, FileRecordUpdate(processed=True))

    assert record.processed is False
    assert store.get(record.id).processed is True


def test_patch_rejects_null_processed():
    with pytest.raises(ValidationError):
        FileRecordUpdate(processed=None)


def test_delete(store):
    record = store.create(_fields())

    assert store.delete(record.id) is True
    assert record.id not in store
    assert store.delete(record.id) is False
