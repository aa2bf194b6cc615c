"""Run the API with uvicorn: ``python -m dicom_insight``."""
import uvicorn

from dicom_insight.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "dicom_insight.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
