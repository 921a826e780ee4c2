"""
API Router for Converted Workbook Delivery

Responsibility:
    HTTP interface for downloading converted workbooks (one at a time or as
    a zip archive) and for cleaning up the artifact store.

Architecture Notes:
    - Part of API Layer (Presentation)
    - Depends on ArtifactStoreProtocol (injected from app.state)
    - Streams content in chunks; artifacts are deleted only after the last
      chunk has been handed to the server, an aborted transfer keeps them

Contains:
    - GET /output/{filename} - Download one workbook (at most once)
    - GET /download-all - Download every workbook as a zip archive
    - DELETE /cleanup - Remove every workbook

Does NOT contain:
    - Conversion (separate router: conversions.py)
    - Storage details (Infrastructure Layer)
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import AsyncIterator
from urllib.parse import quote

from fastapi import APIRouter, Depends, status
from fastapi.responses import StreamingResponse

from tds_converter.api.dependencies import get_artifact_store
from tds_converter.api.schemas.common import ErrorResponse
from tds_converter.api.schemas.conversion import CleanupResponse
from tds_converter.application.ports.artifact_store import (
    ArtifactLeaseProtocol,
    ArtifactStoreProtocol,
)
from tds_converter.domain.conversion.constants import (
    ARCHIVE_NAME_PREFIX,
    XLSX_MEDIA_TYPE,
    ZIP_MEDIA_TYPE,
)

# Configure logger
logger = logging.getLogger(__name__)

ARCHIVE_SKIPPED_HEADER = "X-Archive-Skipped"


# ============================================================================
# ROUTER CONFIGURATION
# ============================================================================


router = APIRouter(
    tags=["outputs"],
    responses={
        500: {"model": ErrorResponse, "description": "Internal Server Error"},
    },
)


# ============================================================================
# HELPERS
# ============================================================================


def archive_filename(now: datetime | None = None) -> str:
    """
    Build the download name of a bulk archive.

    The UTC timestamp is ISO 8601 with millisecond precision, with ":" and
    "." replaced by "-" so the name is valid on every file system.

    Examples:
        >>> archive_filename(datetime(2024, 1, 15, 10, 30, 0, 123000, tzinfo=timezone.utc))
        'converted-files-2024-01-15T10-30-00-123Z.zip'
    """
    now = now or datetime.now(timezone.utc)
    timestamp = now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S")
    timestamp = f"{timestamp}.{now.microsecond // 1000:03d}Z"
    return f"{ARCHIVE_NAME_PREFIX}{timestamp.replace(':', '-').replace('.', '-')}.zip"


def content_disposition(filename: str) -> str:
    """
    Build an attachment Content-Disposition header value.

    Non-ASCII names use the RFC 5987 filename* form.

    Examples:
        >>> content_disposition("report.xlsx")
        'attachment; filename="report.xlsx"'
    """
    quoted = quote(filename)
    if quoted != filename:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{filename}"'


async def stream_lease(lease: ArtifactLeaseProtocol) -> AsyncIterator[bytes]:
    """
    Stream lease content; complete the lease only after the last chunk.

    The generator resumes after a chunk once the server has taken it
    (every middleware in the stack is plain ASGI), so "complete" means the
    whole body was handed to the server.

    If the client disconnects, the generator is closed early and the lease
    is released, so the artifact stays available for a retry.
    """
    try:
        for chunk in lease.iter_chunks():
            yield chunk
        await asyncio.to_thread(lease.complete)
    finally:
        lease.release()


# ============================================================================
# ENDPOINTS
# ============================================================================


@router.get(
    "/output/{filename}",
    response_class=StreamingResponse,
    summary="Download one converted workbook",
    description=(
        "Stream a converted workbook as an attachment. The workbook is "
        "deleted once the download finishes, so each URL works once."
    ),
    responses={
        200: {
            "content": {XLSX_MEDIA_TYPE: {}},
            "description": "Workbook content",
        },
        404: {"model": ErrorResponse, "description": "Not Found - File not found"},
    },
)
async def download_output(
    filename: str,
    artifact_store: ArtifactStoreProtocol = Depends(get_artifact_store),
) -> StreamingResponse:
    """
    Download a workbook by stored name.

    Raises:
        ArtifactNotFoundError: Unknown, already delivered or busy artifact (404)
    """
    lease = await asyncio.to_thread(artifact_store.checkout, filename)

    logger.info(f"Sending file: {filename} ({lease.size_bytes} bytes)")

    return StreamingResponse(
        stream_lease(lease),
        media_type=XLSX_MEDIA_TYPE,
        headers={
            "Content-Disposition": content_disposition(filename),
            "Content-Length": str(lease.size_bytes),
        },
    )


@router.get(
    "/download-all",
    response_class=StreamingResponse,
    summary="Download every converted workbook as a zip archive",
    description=(
        "Stream a zip archive of every workbook currently stored. Included "
        "workbooks are deleted once the download finishes. Workbooks that "
        "could not be included are listed in the X-Archive-Skipped header."
    ),
    responses={
        200: {"content": {ZIP_MEDIA_TYPE: {}}, "description": "Zip archive"},
        404: {
            "model": ErrorResponse,
            "description": "Not Found - No files available for download",
        },
    },
)
async def download_all(
    artifact_store: ArtifactStoreProtocol = Depends(get_artifact_store),
) -> StreamingResponse:
    """
    Download all workbooks as one archive.

    Raises:
        ArtifactNotFoundError: Store is empty (404)
        EncodeError: Archive could not be written (500)
    """
    bundle = await asyncio.to_thread(artifact_store.checkout_archive)
    name = archive_filename()

    headers = {
        "Content-Disposition": content_disposition(name),
        "Content-Length": str(bundle.size_bytes),
    }
    if bundle.warnings:
        headers[ARCHIVE_SKIPPED_HEADER] = ",".join(
            quote(warning.name) for warning in bundle.warnings
        )

    logger.info(f"Sending archive {name} with {len(bundle.included)} files")

    return StreamingResponse(stream_lease(bundle), media_type=ZIP_MEDIA_TYPE, headers=headers)


@router.delete(
    "/cleanup",
    response_model=CleanupResponse,
    status_code=status.HTTP_200_OK,
    summary="Remove every converted workbook",
)
async def cleanup(
    artifact_store: ArtifactStoreProtocol = Depends(get_artifact_store),
) -> CleanupResponse:
    """
    Delete all stored workbooks. Per-file failures are counted, never raised.
    """
    report = await asyncio.to_thread(artifact_store.delete_all)
    return CleanupResponse(
        message="Output directory cleaned",
        deleted=report.deleted_count,
        failed=report.failed_count,
    )
