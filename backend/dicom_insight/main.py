"""FastAPI application entry point."""
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from dicom_insight import __version__
from dicom_insight.config import Settings, settings as default_settings
from dicom_insight.errors import BadRequest, DicomInsightError, InternalError
from dicom_insight.routes.files import router as files_router
from dicom_insight.routes.process import router as process_router
from dicom_insight.schemas.file import HealthResponse
from dicom_insight.services.enhancement import BaseEnhancer, create_enhancer
from dicom_insight.services.file_storage import FileStorageService
from dicom_insight.services.processing import ProcessingService
from dicom_insight.store import RecordStore
from dicom_insight.utils.logging import configure_logging

logger = logging.getLogger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Content-Type", "Authorization"]


def create_app(
    settings: Optional[Settings] = None,
    enhancer: Optional[BaseEnhancer] = None,
) -> FastAPI:
    """Build the API with its own store, storage and processing service."""
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    store = RecordStore()
    file_storage = FileStorageService(settings.FILE_STORAGE_PATH, settings.UPLOAD_CHUNK_SIZE)
    enhancer = enhancer or create_enhancer(settings.ENHANCER)
    processing = ProcessingService(store, file_storage, enhancer, settings.PROCESS_DELAY_SECONDS)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            f"DICOM Insight API starting (storage={file_storage.base_path}, "
            f"enhancer={enhancer.name}, delay={settings.PROCESS_DELAY_SECONDS}s)"
        )
        yield
        logger.info(f"DICOM Insight API shutting down ({len(store)} records discarded)")

    app = FastAPI(
        title="DICOM Insight API",
        version=__version__,
        description="Upload, enhance and download DICOM files.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.file_storage = file_storage
    app.state.processing = processing

    # CORS
    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )

    def cors_headers(request: Request) -> dict:
        headers = {
            "Access-Control-Allow-Methods": ", ".join(CORS_METHODS),
            "Access-Control-Allow-Headers": ", ".join(CORS_HEADERS),
        }
        origin = request.headers.get("origin")
        if "*" in origins:
            headers["Access-Control-Allow-Origin"] = "*"
        elif origin in origins:
            headers["Access-Control-Allow-Origin"] = origin
            headers["Vary"] = "Origin"
        return headers

    @app.middleware("http")
    async def handle_unexpected_errors(request: Request, call_next):
        """Turn any uncaught exception into a logged 500 JSON body."""
        try:
            return await call_next(request)
        except Exception:
            logger.exception(f"Unhandled error on {request.method} {request.url.path}")
            return JSONResponse(status_code=500, content=InternalError().to_dict())

    @app.middleware("http")
    async def apply_cors_headers(request: Request, call_next):
        """Every OPTIONS request gets an empty 200; every response gets the CORS headers."""
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=cors_headers(request))
        response = await call_next(request)
        for name, value in cors_headers(request).items():
            if name not in response.headers:
                response.headers[name] = value
        return response

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({time.time() - start_time:.3f}s)"
        )
        return response

    @app.exception_handler(DicomInsightError)
    async def dicom_insight_error_handler(request: Request, exc: DicomInsightError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        fields = ", ".join(".".join(str(p) for p in err["loc"][1:]) or "body" for err in exc.errors())
        logger.info(f"Rejected malformed request {request.method} {request.url.path}: {fields}")
        error = BadRequest(f"Invalid request: {fields}")
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.get("/api/health", response_model=HealthResponse)
    async def health_check():
        """Liveness check."""
        return HealthResponse()

    app.include_router(files_router)
    app.include_router(process_router)

    # Raw bytes for the viewer
    app.mount("/uploads", StaticFiles(directory=file_storage.base_path), name="uploads")

    return app


app = create_app()
