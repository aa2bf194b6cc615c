"""File record request/response schemas."""
from datetime import datetime
from typing import Optional

from dicom_insight.models.file_record import FileRecord
from dicom_insight.schemas.base import CamelModel


class FileRecordCreate(CamelModel):
    original_name: str
    stored_name: str
    stored_path: str
    byte_size: int
    processed: bool = False
    linked_result_id: Optional[str] = None


class FileRecordUpdate(CamelModel):
    """Patch for the mutable fields only.

    Applied with ``model_dump(exclude_unset=True)``, so only fields passed
    explicitly are merged into the stored record.
    """
    processed: bool = False
    linked_result_id: Optional[str] = None


class UploadResponse(CamelModel):
    success: bool = True
    file_id: str
    url: str


class ProcessResponse(CamelModel):
    success: bool = True
    result_id: str
    url: str


class FileInfoResponse(CamelModel):
    id: str
    original_name: str
    url: str
    file_size: int
    uploaded_at: datetime
    processed: bool = False
    linked_result_id: Optional[str] = None

    @classmethod
    def from_record(cls, record: FileRecord) -> "FileInfoResponse":
        return cls(
            id=record.id,
            original_name=record.original_name,
            url=record.url,
            file_size=record.byte_size,
            uploaded_at=record.uploaded_at,
            processed=record.processed,
            linked_result_id=record.linked_result_id,
        )


class HealthResponse(CamelModel):
    status: str = "ok"
    message: str = "DICOM Insight API is running"
