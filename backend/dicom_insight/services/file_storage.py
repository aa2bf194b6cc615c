"""File storage on the local uploads directory.

Files are written under random ``<uuid>.dcm`` names, so concurrent writers
never share a path. All I/O goes through aiofiles to keep the event loop free.
"""
import logging
import uuid
from dataclasses import dataclass
from pathlib import Path

import aiofiles
import aiofiles.os
from fastapi import Request, UploadFile

from dicom_insight.errors import InternalError, PayloadTooLarge

logger = logging.getLogger(__name__)

DICOM_EXTENSION = ".dcm"
# Part 10 files carry a 128-byte preamble followed by this marker.
DICOM_PREFIX_OFFSET = 128
DICOM_MAGIC = b"DICM"


@dataclass(frozen=True)
class StoredFile:
    stored_name: str
    stored_path: str
    byte_size: int


class FileStorageService:
    """Handles file read/write in the uploads directory."""

    def __init__(self, base_path: str | Path, chunk_size: int = 1024 * 1024):
        self.base_path = Path(base_path).resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.chunk_size = chunk_size

    def _new_target(self) -> tuple[str, Path]:
        stored_name = f"{uuid.uuid4()}{DICOM_EXTENSION}"
        return stored_name, self.base_path / stored_name

    async def save_upload(self, upload: UploadFile, max_bytes: int) -> StoredFile:
        """Stream an uploaded file to disk in chunks.

        Raises PayloadTooLarge once more than ``max_bytes`` have arrived and
        InternalError on I/O failure. Either way the partial file is removed.
        """
        stored_name, file_path = self._new_target()
        written = 0
        try:
            async with aiofiles.open(file_path, "wb") as f:
                while chunk := await upload.read(self.chunk_size):
                    written += len(chunk)
                    if written > max_bytes:
                        raise PayloadTooLarge(
                            f"File exceeds the maximum upload size of {max_bytes} bytes"
                        )
                    await f.write(chunk)
        except PayloadTooLarge:
            await self.delete(str(file_path))
            raise
        except OSError as e:
            logger.error(f"Failed to write upload to {file_path}: {e}")
            await self.delete(str(file_path))
            raise InternalError("Failed to upload file") from e

        return StoredFile(stored_name, str(file_path), written)

    async def save(self, file_bytes: bytes) -> StoredFile:
        """Write bytes under a fresh name. Removes the partial file on failure."""
        stored_name, file_path = self._new_target()
        try:
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(file_bytes)
        except OSError:
            await self.delete(str(file_path))
            raise
        return StoredFile(stored_name, str(file_path), len(file_bytes))

    async def read(self, storage_path: str) -> bytes:
        """Read file bytes from storage path."""
        async with aiofiles.open(storage_path, "rb") as f:
            return await f.read()

    async def exists(self, storage_path: str) -> bool:
        return await aiofiles.os.path.isfile(storage_path)

    async def delete(self, storage_path: str) -> None:
        """Delete a file if present. Failures are logged, not raised."""
        try:
            if await aiofiles.os.path.exists(storage_path):
                await aiofiles.os.remove(storage_path)
        except OSError as e:
            logger.warning(f"Could not remove {storage_path}: {e}")

    async def has_dicom_magic(self, storage_path: str) -> bool:
        """True if the bytes at offset 128-131 read ``DICM``."""
        async with aiofiles.open(storage_path, "rb") as f:
            await f.seek(DICOM_PREFIX_OFFSET)
            return await f.read(len(DICOM_MAGIC)) == DICOM_MAGIC


def get_file_storage(request: Request) -> FileStorageService:
    """FastAPI dependency returning the app's storage service."""
    return request.app.state.file_storage
