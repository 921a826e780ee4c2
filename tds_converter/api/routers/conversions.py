"""
API Router for TDS Upload and Conversion

Responsibility:
    HTTP interface for uploading caret-delimited files and converting them
    to .xlsx workbooks. Thin layer that delegates to ConvertBatchUseCase
    via dependency injection.

Architecture Notes:
    - Part of API Layer (Presentation)
    - Depends on Application Layer (ConvertBatchUseCase)
    - Enforces the per-file upload size limit before any conversion starts
    - No business logic - pure HTTP concerns

Contains:
    - POST /upload - Upload one or more files and convert them

Does NOT contain:
    - Parsing or workbook encoding (Domain / Infrastructure Layer)
    - Artifact delivery (separate router: outputs.py)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile, status

from tds_converter.api.dependencies import get_convert_batch_use_case, get_settings
from tds_converter.api.schemas.common import ErrorResponse
from tds_converter.api.schemas.conversion import ConversionResultItem, UploadResponse
from tds_converter.application.services.convert_batch_use_case import (
    ConvertBatchUseCase,
)
from tds_converter.config import Settings
from tds_converter.domain.conversion.value_objects.raw_input import RawInput
from tds_converter.domain.shared.exceptions import (
    EmptyUploadError,
    FileSizeExceededError,
)

# Configure logger
logger = logging.getLogger(__name__)

# Bytes read from an upload per step while enforcing the size limit
READ_CHUNK_SIZE = 1024 * 1024


# ============================================================================
# ROUTER CONFIGURATION
# ============================================================================


router = APIRouter(
    tags=["conversions"],
    responses={
        400: {"model": ErrorResponse, "description": "Bad Request - No files uploaded"},
        413: {
            "model": ErrorResponse,
            "description": "Payload Too Large - A file exceeds the upload limit",
        },
        500: {"model": ErrorResponse, "description": "Internal Server Error"},
    },
)


# ============================================================================
# HELPERS
# ============================================================================


async def read_limited(upload: UploadFile, max_size_bytes: int) -> bytes:
    """
    Read an uploaded file, failing as soon as it grows past the limit.

    Args:
        upload: FastAPI UploadFile
        max_size_bytes: Maximum allowed size

    Returns:
        File content

    Raises:
        FileSizeExceededError: If the file is larger than max_size_bytes
    """
    chunks: list[bytes] = []
    received = 0
    while True:
        chunk = await upload.read(READ_CHUNK_SIZE)
        if not chunk:
            break
        received += len(chunk)
        if received > max_size_bytes:
            raise FileSizeExceededError(
                "File exceeds upload limit",
                filename=upload.filename,
                file_size_bytes=received,
                max_size_bytes=max_size_bytes,
            )
        chunks.append(chunk)
    return b"".join(chunks)


# ============================================================================
# ENDPOINTS
# ============================================================================


@router.post(
    "/upload",
    status_code=status.HTTP_200_OK,
    response_model=UploadResponse,
    response_model_exclude_none=True,
    summary="Upload and convert TDS files",
    description=(
        "Upload one or more caret-delimited text files (multipart field 'files'). "
        "Each file is converted to an .xlsx workbook independently; the response "
        "lists one result per file in upload order. Use download_url to fetch a "
        "workbook once, or GET /api/download-all for a zip of every workbook."
    ),
)
async def upload_files(
    files: Optional[list[UploadFile]] = File(
        default=None,
        description="Caret-delimited text files to convert",
    ),
    settings: Settings = Depends(get_settings),
    use_case: ConvertBatchUseCase = Depends(get_convert_batch_use_case),
) -> UploadResponse:
    """
    Upload files and convert each of them.

    Process Flow:
        1. Reject empty request (400 NO_FILES_UPLOADED)
        2. Read every file, enforcing the size limit (413 FILE_TOO_LARGE,
           nothing is converted)
        3. Delegate to ConvertBatchUseCase
        4. Map outcomes to response items

    Per-file conversion errors never fail the request; they appear as
    items with status "error".

    Examples:
        >>> curl -X POST "http://localhost:8000/api/upload" \\
        ...      -F "files=@orders.tds" -F "files=@customers.tds"
    """
    if not files:
        raise EmptyUploadError("No files uploaded")

    inputs: list[RawInput] = []
    for upload in files:
        data = await read_limited(upload, settings.max_file_size_bytes)
        inputs.append(RawInput(display_name=upload.filename or "", data=data))

    logger.info(f"Received {len(inputs)} files for conversion")

    outcomes = await use_case.execute(inputs)

    return UploadResponse(
        results=[ConversionResultItem.from_outcome(outcome) for outcome in outcomes]
    )
