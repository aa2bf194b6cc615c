"""Files API routes: upload, file info, download."""
import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, UploadFile, File as FastAPIFile
from fastapi.responses import FileResponse

from dicom_insight.config import Settings, get_settings
from dicom_insight.errors import BadRequest, NotFound, UnsupportedMediaType, PayloadTooLarge
from dicom_insight.schemas.file import FileInfoResponse, FileRecordCreate, UploadResponse
from dicom_insight.services.file_storage import DICOM_EXTENSION, FileStorageService, get_file_storage
from dicom_insight.store import RecordStore, get_store

logger = logging.getLogger(__name__)

DICOM_MEDIA_TYPE = "application/dicom"

router = APIRouter(prefix="/api", tags=["files"])


@router.post("/upload", response_model=UploadResponse)
async def upload_file(
    file: Optional[UploadFile] = FastAPIFile(None),
    store: RecordStore = Depends(get_store),
    file_storage: FileStorageService = Depends(get_file_storage),
    settings: Settings = Depends(get_settings),
):
    """Upload a DICOM file and create a file record."""
    if file is None or not file.filename:
        raise BadRequest("No file uploaded")

    original_name = file.filename
    if Path(original_name).suffix.lower() != DICOM_EXTENSION:
        logger.info(f"Rejected upload '{original_name}': not a .dcm file")
        raise UnsupportedMediaType()

    max_bytes = settings.MAX_UPLOAD_BYTES
    if file.size is not None and file.size > max_bytes:
        logger.info(f"Rejected upload '{original_name}': {file.size} bytes > {max_bytes}")
        raise PayloadTooLarge(f"File exceeds the maximum upload size of {max_bytes} bytes")

    stored = await file_storage.save_upload(file, max_bytes)

    try:
        if not await file_storage.has_dicom_magic(stored.stored_path):
            logger.warning(f"'{original_name}' may not be a valid DICOM file (missing DICM magic bytes)")
    except OSError as e:
        logger.warning(f"Could not check DICM magic bytes of '{original_name}': {e}")

    record = store.create(FileRecordCreate(
        original_name=original_name,
        stored_name=stored.stored_name,
        stored_path=stored.stored_path,
        byte_size=stored.byte_size,
    ))
    logger.info(f"Stored upload {record.id} '{original_name}' ({record.byte_size} bytes) as {record.stored_name}")

    return UploadResponse(file_id=record.id, url=record.url)


@router.get("/file/{file_id}", response_model=FileInfoResponse)
async def get_file_info(
    file_id: str,
    store: RecordStore = Depends(get_store),
):
    """Get file metadata by ID."""
    record = store.get(file_id)
    if not record:
        raise NotFound("File not found")
    return FileInfoResponse.from_record(record)


@router.get("/download/{file_id}")
async def download_file(
    file_id: str,
    store: RecordStore = Depends(get_store),
    file_storage: FileStorageService = Depends(get_file_storage),
):
    """Stream a stored file back as an attachment."""
    record = store.get(file_id)
    if not record:
        logger.info(f"Download of unknown record {file_id}")
        raise NotFound("File not found")

    if not await file_storage.exists(record.stored_path):
        logger.warning(f"Download of {file_id}: bytes missing at {record.stored_path}")
        raise NotFound("File not found on disk")

    return FileResponse(
        path=record.stored_path,
        filename=record.original_name,
        media_type=DICOM_MEDIA_TYPE,
    )
