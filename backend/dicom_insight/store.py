"""In-memory record store and its FastAPI dependency.

Usage in routes:
    from dicom_insight.store import RecordStore, get_store

    @router.get("/file/{file_id}")
    async def get_file(file_id: str, store: RecordStore = Depends(get_store)):
        record = store.get(file_id)

The store is volatile: metadata is lost on restart. One instance is built by
the app factory and kept on ``app.state.store``.
"""
import dataclasses
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from fastapi import Request

from dicom_insight.models.file_record import FileRecord
from dicom_insight.schemas.file import FileRecordCreate, FileRecordUpdate

logger = logging.getLogger(__name__)


class RecordStore:
    """FileRecords keyed by id.

    Every operation is a single dict access on the event loop thread, so
    each call is atomic. Concurrent updates to one id are last write wins.
    Records are frozen dataclasses; updates replace the stored value.
    """

    def __init__(self):
        self._records: dict[str, FileRecord] = {}

    def create(self, fields: FileRecordCreate) -> FileRecord:
        """Assign id and uploaded_at, store, return the full record."""
        record = FileRecord(
            id=str(uuid.uuid4()),
            uploaded_at=datetime.now(timezone.utc),
            **fields.model_dump(),
        )
        self._records[record.id] = record
        logger.debug(f"Created record {record.id} ({record.original_name})")
        return record

    def get(self, record_id: str) -> Optional[FileRecord]:
        return self._records.get(record_id)

    def update(self, record_id: str, patch: FileRecordUpdate) -> Optional[FileRecord]:
        """Merge the fields set on ``patch``. Returns None if the id is unknown."""
        existing = self._records.get(record_id)
        if existing is None:
            return None
        updated = dataclasses.replace(existing, **patch.model_dump(exclude_unset=True))
        self._records[record_id] = updated
        return updated

    def delete(self, record_id: str) -> bool:
        return self._records.pop(record_id, None) is not None

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records


def get_store(request: Request) -> RecordStore:
    """FastAPI dependency returning the app's record store."""
    return request.app.state.store
