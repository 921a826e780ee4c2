"""
Integration tests for the full upload -> download pipeline.

Uses the real file system store in a tmp directory, the real openpyxl
encoder and the FastAPI app. No mocks.
"""

import io
import zipfile

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from tds_converter.api.main import create_app
from tds_converter.config import Settings


@pytest.fixture
def output_dir(tmp_path):
    return tmp_path / "output"


@pytest.fixture
def client(output_dir):
    settings = Settings(output_dir=output_dir, max_file_size_mb=1, max_workers=3)
    with TestClient(create_app(settings=settings)) as test_client:
        yield test_client


def _upload(client, *named_payloads):
    return client.post(
        "/api/upload",
        files=[("files", (name, data, "text/plain")) for name, data in named_payloads],
    )


def test_upload_then_download_each_file(client, output_dir, read_sheet):
    """Test upload of three files, one broken, then individual downloads."""
    response = _upload(
        client,
        ("orders.tds", b"id^item^qty\n1^valve^10\n2^pipe\n"),
        ("broken.tds", b"\xff\xfe\x00"),
        ("notes.txt", b"just text"),
    )

    assert response.status_code == status.HTTP_200_OK
    results = response.json()["results"]
    assert [item["status"] for item in results] == ["success", "error", "success"]
    assert sorted(path.name for path in output_dir.iterdir() if path.is_file()) == [
        "notes.xlsx",
        "orders.xlsx",
    ]

    download = client.get(results[0]["download_url"])
    assert download.status_code == status.HTTP_200_OK
    title, rows = read_sheet(download.content, 4, 3)
    assert title == "Sheet1"
    assert rows == [
        ["id", "item", "qty"],
        ["1", "valve", "10"],
        ["2", "pipe", ""],
        ["", "", ""],
    ]

    # Delivered once, then removed from disk
    assert not (output_dir / "orders.xlsx").exists()
    assert client.get(results[0]["download_url"]).status_code == status.HTTP_404_NOT_FOUND


def test_upload_then_download_all(client, output_dir, read_sheet):
    """Test bulk download of every converted file."""
    _upload(client, ("a.tds", b"1^2"), ("b.tds", b"3^4^5"))

    response = client.get("/api/download-all")

    assert response.status_code == status.HTTP_200_OK
    with zipfile.ZipFile(io.BytesIO(response.content)) as archive:
        assert sorted(archive.namelist()) == ["a.xlsx", "b.xlsx"]
        _, rows = read_sheet(archive.read("b.xlsx"), 1, 3)
    assert rows == [["3", "4", "5"]]
    assert client.get("/api/download-all").status_code == status.HTTP_404_NOT_FOUND


def test_upload_then_cleanup(client, output_dir):
    """Test that cleanup empties the output directory."""
    _upload(client, ("a.tds", b"1"), ("b.tds", b"2"))

    response = client.delete("/api/cleanup")

    assert response.json()["deleted"] == 2
    assert [path for path in output_dir.iterdir() if path.is_file()] == []


def test_reupload_after_download(client):
    """Test that a name can be converted again after delivery."""
    _upload(client, ("a.tds", b"first"))
    assert client.get("/api/output/a.xlsx").status_code == status.HTTP_200_OK

    _upload(client, ("a.tds", b"second"))

    assert client.get("/api/output/a.xlsx").status_code == status.HTTP_200_OK
