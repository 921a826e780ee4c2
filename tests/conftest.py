"""
Pytest Configuration and Shared Fixtures

This module contains pytest configuration and shared fixtures used across
all test suites (unit, integration).

Fixtures:
    - settings: Settings with an in-memory store and a tmp output dir
    - memory_store: Fresh InMemoryArtifactStore
    - fs_store: FileSystemArtifactStore scoped to tmp_path
    - read_sheet: Helper that re-reads a produced workbook with openpyxl

Usage:
    def test_something(memory_store):
        memory_store.put("a.xlsx", b"data")
        assert memory_store.list() == {"a.xlsx"}
"""

import io
import logging
from typing import Callable

import pytest
from openpyxl import load_workbook

from tds_converter.config import Settings
from tds_converter.infrastructure.file_storage.artifact_store import (
    FileSystemArtifactStore,
    InMemoryArtifactStore,
)

# Configure logger for tests
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


# ============================================================================
# SETTINGS / STORE FIXTURES
# ============================================================================


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings for tests: in-memory store, 1MB upload limit."""
    return Settings(
        output_dir=tmp_path / "output",
        max_file_size_mb=1,
        max_workers=2,
        store_backend="memory",
    )


@pytest.fixture
def memory_store() -> InMemoryArtifactStore:
    """Fresh in-memory artifact store."""
    return InMemoryArtifactStore()


@pytest.fixture
def fs_store(tmp_path) -> FileSystemArtifactStore:
    """File system artifact store scoped to the test's tmp directory."""
    store = FileSystemArtifactStore(tmp_path / "output")
    yield store
    store.close()


# ============================================================================
# WORKBOOK HELPERS
# ============================================================================


def _read_sheet(data: bytes, rows: int, columns: int) -> tuple[str, list[list[str]]]:
    """
    Re-read the first sheet of an .xlsx file.

    openpyxl returns None for empty cells; they are mapped back to "".

    Returns:
        (sheet title, rows as lists of strings)
    """
    workbook = load_workbook(io.BytesIO(data))
    sheet = workbook.worksheets[0]
    values = [
        ["" if value is None else value for value in row]
        for row in sheet.iter_rows(
            min_row=1, max_row=rows, min_col=1, max_col=columns, values_only=True
        )
    ]
    return sheet.title, values


@pytest.fixture
def read_sheet() -> Callable[[bytes, int, int], tuple[str, list[list[str]]]]:
    """Fixture exposing the workbook re-reading helper."""
    return _read_sheet
