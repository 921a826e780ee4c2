"""
FastAPI Application Setup

Main entry point for the TDS Converter API application.

Responsibility:
    - FastAPI app initialization
    - Artifact store lifecycle (created on startup, closed on shutdown)
    - Router registration (conversions, outputs)
    - CORS middleware configuration
    - Global exception handlers
    - Request logging middleware (RequestLoggingMiddleware)
    - Health check endpoint

Architecture Notes:
    - Part of API Layer (Presentation)
    - Entry point for HTTP server (uvicorn)
    - Centralizes cross-cutting concerns (logging, CORS, error handling)
    - No business logic - pure HTTP orchestration

Contains:
    - create_app() factory function
    - Global exception handlers
    - Request logging middleware (RequestLoggingMiddleware)
    - Health check endpoint: GET /health

Does NOT contain:
    - Conversion logic (delegated to Application Layer)
    - Storage details (Infrastructure Layer)
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from tds_converter import __version__
from tds_converter.api.routers import conversions, outputs
from tds_converter.api.schemas.common import ErrorResponse
from tds_converter.application.ports.artifact_store import ArtifactStoreProtocol
from tds_converter.config import Settings
from tds_converter.domain.shared.exceptions import (
    ArtifactNotFoundError,
    DomainException,
    EmptyUploadError,
    EncodeError,
    FileSizeExceededError,
)
from tds_converter.infrastructure.file_storage.artifact_store import (
    FileSystemArtifactStore,
    InMemoryArtifactStore,
)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


# ============================================================================
# RESPONSE MODELS
# ============================================================================


class HealthCheckResponse(BaseModel):
    """
    Health check response model.

    Simple status indicator for monitoring and load balancers.

    Attributes:
        status: Health status (always "ok" if endpoint responds)
        version: API version
        timestamp: Unix timestamp of health check
    """

    status: str = "ok"
    version: str = __version__
    timestamp: float


# ============================================================================
# MIDDLEWARE
# ============================================================================


class RequestLoggingMiddleware:
    """
    Request logging middleware (plain ASGI).

    Logs all incoming requests with method, path, status code, and duration.
    Response messages are forwarded to the server unchanged, so a streamed
    body chunk has reached the server before the endpoint's generator
    resumes. Download endpoints rely on this to delete an artifact only
    after its last chunk was sent.

    Logging Format:
        INFO: "Incoming request: POST /api/upload"
        INFO: "Request completed: POST /api/upload - 200 - 0.123s"
    """

    def __init__(self, app) -> None:
        self.app = app

    async def __call__(self, scope, receive, send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        method = scope["method"]
        path = scope["path"]
        logger.info(f"Incoming request: {method} {path}")

        start_time = time.time()
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

        async def send_with_status(message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_with_status)
        finally:
            duration = time.time() - start_time
            logger.info(
                f"Request completed: {method} {path} - {status_code} - {duration:.3f}s"
            )


# ============================================================================
# EXCEPTION HANDLERS
# ============================================================================


async def domain_exception_handler(request: Request, exc: DomainException):
    """
    Global exception handler for domain layer exceptions.

    Catches all DomainException subclasses and converts them to
    appropriate HTTP error responses with consistent ErrorResponse format.

    Mapping:
        - EmptyUploadError -> 400 NO_FILES_UPLOADED
        - FileSizeExceededError -> 413 FILE_TOO_LARGE
        - ArtifactNotFoundError (with name) -> 404 FILE_NOT_FOUND
        - ArtifactNotFoundError (archive) -> 404 NO_FILES_AVAILABLE
        - EncodeError -> 500 ARCHIVE_FAILED
        - Other DomainException -> 400 Bad Request

    Args:
        request: FastAPI Request object
        exc: DomainException or subclass

    Returns:
        JSONResponse with ErrorResponse format and appropriate status code
    """
    details: dict = {"exception_type": exc.__class__.__name__}

    if isinstance(exc, EmptyUploadError):
        status_code = status.HTTP_400_BAD_REQUEST
        error_code = "NO_FILES_UPLOADED"
    elif isinstance(exc, FileSizeExceededError):
        status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
        error_code = "FILE_TOO_LARGE"
        details.update(filename=exc.filename, max_size_bytes=exc.max_size_bytes)
    elif isinstance(exc, ArtifactNotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
        if exc.name is not None:
            error_code = "FILE_NOT_FOUND"
            details["filename"] = exc.name
        else:
            error_code = "NO_FILES_AVAILABLE"
    elif isinstance(exc, EncodeError):
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        error_code = "ARCHIVE_FAILED"
    else:
        status_code = status.HTTP_400_BAD_REQUEST
        error_code = exc.__class__.__name__.replace("Error", "").upper()

    error_response = ErrorResponse(
        code=error_code,
        message=exc.message,
        details=details,
    )

    logger.warning(
        f"Domain exception: {exc.__class__.__name__} - {str(exc)} - "
        f"Request: {request.method} {request.url.path}"
    )

    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(),
    )


async def generic_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler for unexpected exceptions.

    Catches all unhandled exceptions and converts to 500 Internal Server Error.
    Logs full stack trace for debugging.
    """
    error_response = ErrorResponse(
        code="INTERNAL_SERVER_ERROR",
        message="An unexpected error occurred",
        details={"error": str(exc), "type": exc.__class__.__name__},
    )

    logger.error(
        f"Unexpected error: {exc.__class__.__name__} - {str(exc)} - "
        f"Request: {request.method} {request.url.path}",
        exc_info=True,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response.model_dump(),
    )


# ============================================================================
# APP FACTORY
# ============================================================================


def build_artifact_store(settings: Settings) -> ArtifactStoreProtocol:
    """
    Create the artifact store selected by settings.store_backend.

    Raises:
        OSError: If the output directory cannot be created
    """
    if settings.store_backend == "memory":
        return InMemoryArtifactStore(compression_level=settings.archive_compression_level)
    return FileSystemArtifactStore(
        settings.output_dir,
        compression_level=settings.archive_compression_level,
        purge_on_close=settings.purge_on_shutdown,
    )


def create_app(
    settings: Optional[Settings] = None,
    artifact_store: Optional[ArtifactStoreProtocol] = None,
) -> FastAPI:
    """
    FastAPI application factory.

    Creates and configures FastAPI app with all middleware, routers,
    and exception handlers.

    Args:
        settings: Application settings (default: Settings.from_env())
        artifact_store: Pre-built store (default: built from settings on
            startup). A store passed in is still closed on shutdown.

    Returns:
        Configured FastAPI application instance

    Usage:
        >>> app = create_app()
        >>> # Run with uvicorn:
        >>> # uvicorn tds_converter.api.main:app --reload
    """
    settings = settings or Settings.from_env()

    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        store = artifact_store or build_artifact_store(settings)
        app.state.settings = settings
        app.state.artifact_store = store
        logger.info(f"Artifact store ready ({type(store).__name__})")
        try:
            yield
        finally:
            store.close()
            logger.info("Artifact store closed")

    app = FastAPI(
        title="TDS Converter API",
        version=__version__,
        description=(
            "Converts caret-delimited text files to Excel workbooks. "
            "Upload files, then download each workbook once or all of them as a zip."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Add CORS middleware (allow all origins for development)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", outputs.ARCHIVE_SKIPPED_HEADER],
    )

    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(conversions.router, prefix="/api")
    app.include_router(outputs.router, prefix="/api")

    @app.get(
        "/health",
        response_model=HealthCheckResponse,
        status_code=status.HTTP_200_OK,
        summary="Health check endpoint",
        description="Simple health check for monitoring and load balancers",
        tags=["health"],
    )
    async def health_check() -> HealthCheckResponse:
        return HealthCheckResponse(
            status="ok",
            version=__version__,
            timestamp=time.time(),
        )

    logger.info("FastAPI application created successfully")

    return app


# ============================================================================
# APP INSTANCE (for uvicorn)
# ============================================================================

# Usage: uvicorn tds_converter.api.main:app --reload
app = create_app()
