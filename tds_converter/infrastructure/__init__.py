"""
Infrastructure Layer - External Dependencies

Implements technical capabilities that support the Domain and Application
Layers.

Architecture:
    - Implements Domain protocols (WorkbookEncoderProtocol)
    - Implements Application Layer protocols (ArtifactStoreProtocol)
    - Depends on external libraries (openpyxl) and the file system
    - No Domain business logic (only technical implementations)

Modules:
    - file_storage: Workbook encoding and artifact storage

Usage:
    >>> from tds_converter.infrastructure import (
    ...     WorkbookEncoderService,
    ...     FileSystemArtifactStore,
    ... )
"""

from .file_storage import (
    FileSystemArtifactStore,
    InMemoryArtifactStore,
    WorkbookEncoderService,
)

__all__ = [
    "WorkbookEncoderService",
    "FileSystemArtifactStore",
    "InMemoryArtifactStore",
]
