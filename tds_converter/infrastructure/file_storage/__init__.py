"""
File Storage Infrastructure Module

Workbook encoding (openpyxl) and artifact storage (file system or memory).

Exports:
    - WorkbookEncoderService: TabularGrid -> .xlsx bytes (implements Protocol)
    - FileSystemArtifactStore: Artifacts in a scoped output directory
    - InMemoryArtifactStore: Artifacts in a dict
"""

from .artifact_store import FileSystemArtifactStore, InMemoryArtifactStore
from .workbook_encoder import WorkbookEncoderService

__all__ = [
    "WorkbookEncoderService",
    "FileSystemArtifactStore",
    "InMemoryArtifactStore",
]
