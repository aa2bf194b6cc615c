"""FileRecord - metadata for one stored DICOM file (bytes live in the uploads dir)."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class FileRecord:
    id: str
    original_name: str
    stored_name: str
    stored_path: str
    byte_size: int
    uploaded_at: datetime
    processed: bool = False
    # Set on the original only, pointing at its processed copy.
    linked_result_id: Optional[str] = None

    @property
    def url(self) -> str:
        """Public path the static mount serves the bytes under."""
        return f"/uploads/{self.stored_name}"
