"""Processing API - run the (simulated) enhancement on an uploaded file."""
from fastapi import APIRouter, Depends

from dicom_insight.schemas.file import ProcessResponse
from dicom_insight.services.processing import ProcessingService, get_processing_service

router = APIRouter(prefix="/api", tags=["process"])


@router.post("/process/{file_id}", response_model=ProcessResponse)
async def process_file(
    file_id: str,
    processing: ProcessingService = Depends(get_processing_service),
):
    """Enhance a file. Responds once the processed copy and its record exist."""
    result = await processing.process(file_id)
    return ProcessResponse(result_id=result.id, url=result.url)
