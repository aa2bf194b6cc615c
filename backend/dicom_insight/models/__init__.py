"""In-memory record types."""
from dicom_insight.models.file_record import FileRecord

__all__ = ["FileRecord"]
