"""
Tests for download and cleanup endpoints.

Covers:
- GET /api/output/{filename} (at-most-once streaming)
- GET /api/download-all (zip archive, skipped header)
- DELETE /api/cleanup
- Streaming helpers
"""

import io
import re
import zipfile
from datetime import datetime, timezone

import pytest
from fastapi import status

from tds_converter.api.routers.outputs import (
    ARCHIVE_SKIPPED_HEADER,
    archive_filename,
    content_disposition,
    stream_lease,
)
from tds_converter.domain.conversion.constants import XLSX_MEDIA_TYPE


# ============================================================================
# SINGLE DOWNLOAD
# ============================================================================


def test_download_output_streams_and_deletes(client, memory_store):
    """
    Test single download.

    Verifies:
    - Returns file content with xlsx media type and attachment header
    - Second download of the same name returns 404
    """
    memory_store.put("report.xlsx", b"PK-workbook")

    response = client.get("/api/output/report.xlsx")

    assert response.status_code == status.HTTP_200_OK
    assert response.content == b"PK-workbook"
    assert response.headers["content-type"] == XLSX_MEDIA_TYPE
    assert response.headers["content-disposition"] == 'attachment; filename="report.xlsx"'
    assert memory_store.list() == set()

    second = client.get("/api/output/report.xlsx")
    assert second.status_code == status.HTTP_404_NOT_FOUND


def test_download_output_unknown_file(client):
    """Test 404 for a name never stored."""
    response = client.get("/api/output/nothing.xlsx")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["code"] == "FILE_NOT_FOUND"


def test_download_output_busy_file(client, memory_store):
    """Test that a file being delivered elsewhere is not handed out twice."""
    memory_store.put("report.xlsx", b"data")
    lease = memory_store.checkout("report.xlsx")

    response = client.get("/api/output/report.xlsx")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    lease.release()


# ============================================================================
# BULK DOWNLOAD
# ============================================================================


def test_download_all_returns_zip(client, memory_store):
    """Test archive of every stored workbook."""
    memory_store.put("a.xlsx", b"A")
    memory_store.put("b.xlsx", b"B")

    response = client.get("/api/download-all")

    assert response.status_code == status.HTTP_200_OK
    assert response.headers["content-type"] == "application/zip"
    assert re.fullmatch(
        r'attachment; filename="converted-files-\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2}-\d{3}Z\.zip"',
        response.headers["content-disposition"],
    )
    assert ARCHIVE_SKIPPED_HEADER not in response.headers
    with zipfile.ZipFile(io.BytesIO(response.content)) as archive:
        assert sorted(archive.namelist()) == ["a.xlsx", "b.xlsx"]
    assert memory_store.list() == set()


def test_download_all_empty_store(client):
    """Test 404 with NO_FILES_AVAILABLE when nothing is stored."""
    response = client.get("/api/download-all")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    body = response.json()
    assert body["code"] == "NO_FILES_AVAILABLE"
    assert body["message"] == "No files available for download"


def test_download_all_reports_skipped(client, memory_store):
    """Test X-Archive-Skipped header for a busy workbook."""
    memory_store.put("a.xlsx", b"A")
    memory_store.put("b.xlsx", b"B")
    lease = memory_store.checkout("a.xlsx")

    response = client.get("/api/download-all")

    assert response.status_code == status.HTTP_200_OK
    assert response.headers[ARCHIVE_SKIPPED_HEADER] == "a.xlsx"
    lease.release()
    assert memory_store.list() == {"a.xlsx"}


# ============================================================================
# CLEANUP
# ============================================================================


def test_cleanup_removes_everything(client, memory_store):
    """Test DELETE /api/cleanup."""
    memory_store.put("a.xlsx", b"A")
    memory_store.put("b.xlsx", b"B")

    response = client.delete("/api/cleanup")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "message": "Output directory cleaned",
        "deleted": 2,
        "failed": 0,
    }
    assert memory_store.list() == set()


def test_cleanup_empty_store(client):
    """Test that cleanup always succeeds."""
    response = client.delete("/api/cleanup")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["deleted"] == 0


# ============================================================================
# HELPERS
# ============================================================================


def test_archive_filename_format():
    """Test timestamped archive name."""
    now = datetime(2024, 1, 15, 10, 30, 5, 123456, tzinfo=timezone.utc)

    assert archive_filename(now) == "converted-files-2024-01-15T10-30-05-123Z.zip"


def test_content_disposition_non_ascii():
    """Test RFC 5987 encoding for non-ASCII names."""
    assert (
        content_disposition("zamówienia.xlsx")
        == "attachment; filename*=utf-8''zam%C3%B3wienia.xlsx"
    )


@pytest.mark.asyncio
async def test_stream_lease_interrupted_keeps_artifact(memory_store):
    """Test that closing the stream early releases the lease."""
    memory_store.put("big.xlsx", b"x" * (200 * 1024))
    stream = stream_lease(memory_store.checkout("big.xlsx"))

    first_chunk = await stream.__anext__()
    await stream.aclose()

    assert len(first_chunk) == 64 * 1024
    assert memory_store.list() == {"big.xlsx"}
    # Artifact can be downloaded again
    assert memory_store.get_once("big.xlsx") == b"x" * (200 * 1024)


@pytest.mark.asyncio
async def test_stream_lease_complete_deletes_artifact(memory_store):
    """Test that a fully consumed stream completes the lease."""
    memory_store.put("small.xlsx", b"abc")

    chunks = [chunk async for chunk in stream_lease(memory_store.checkout("small.xlsx"))]

    assert chunks == [b"abc"]
    assert memory_store.list() == set()
