"""Simulated AI enhancement of an uploaded file.

Steps run strictly in order: lookup, delay, enhance and write the copy,
create the derived record, link the original to it. The original record is
only touched after the copy is fully on disk.
"""
import asyncio
import logging
import time

from fastapi import Request

from dicom_insight.errors import InternalError, NotFound
from dicom_insight.models.file_record import FileRecord
from dicom_insight.schemas.file import FileRecordCreate, FileRecordUpdate
from dicom_insight.services.enhancement import BaseEnhancer
from dicom_insight.services.file_storage import FileStorageService
from dicom_insight.store import RecordStore

logger = logging.getLogger(__name__)

PROCESSED_PREFIX = "processed_"


class ProcessingService:

    def __init__(
        self,
        store: RecordStore,
        file_storage: FileStorageService,
        enhancer: BaseEnhancer,
        delay_seconds: float = 2.0,
    ):
        self.store = store
        self.file_storage = file_storage
        self.enhancer = enhancer
        self.delay_seconds = delay_seconds

    async def process(self, file_id: str) -> FileRecord:
        """Produce an enhanced copy of ``file_id`` and return its new record."""
        original = self.store.get(file_id)
        if original is None:
            raise NotFound("Original file not found")

        logger.info(f"Processing {file_id} with enhancer '{self.enhancer.name}'")
        start = time.monotonic()

        # Stand-in for model inference latency
        await asyncio.sleep(self.delay_seconds)

        try:
            data = await self.file_storage.read(original.stored_path)
        except OSError as e:
            logger.error(f"Could not read original {file_id} at {original.stored_path}: {e}")
            raise InternalError("Failed to process file") from e

        try:
            enhanced = await asyncio.to_thread(self.enhancer.enhance, data)
        except Exception as e:
            logger.exception(f"Enhancer '{self.enhancer.name}' failed on {file_id}")
            raise InternalError("Failed to process file") from e

        try:
            stored = await self.file_storage.save(enhanced)
        except OSError as e:
            logger.error(f"Could not write processed copy of {file_id}: {e}")
            raise InternalError("Failed to process file") from e

        result = self.store.create(FileRecordCreate(
            original_name=f"{PROCESSED_PREFIX}{original.original_name}",
            stored_name=stored.stored_name,
            stored_path=stored.stored_path,
            byte_size=stored.byte_size,
            processed=True,
        ))

        if self.store.update(file_id, FileRecordUpdate(processed=True, linked_result_id=result.id)) is None:
            logger.warning(f"Original {file_id} disappeared during processing; result {result.id} is unlinked")

        logger.info(f"Processed {file_id} -> {result.id} in {time.monotonic() - start:.2f}s")
        return result


def get_processing_service(request: Request) -> ProcessingService:
    """FastAPI dependency returning the app's processing service."""
    return request.app.state.processing
