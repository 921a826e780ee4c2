"""
Application Layer Ports (Interfaces)

Contains Protocol definitions for dependency inversion.
Infrastructure Layer implements these protocols.
"""

from tds_converter.application.ports.artifact_store import (
    ArchiveLeaseProtocol,
    ArchiveWarning,
    ArchiveWarningKind,
    ArtifactLeaseProtocol,
    ArtifactStoreProtocol,
    CleanupReport,
)

__all__ = [
    "ArchiveLeaseProtocol",
    "ArchiveWarning",
    "ArchiveWarningKind",
    "ArtifactLeaseProtocol",
    "ArtifactStoreProtocol",
    "CleanupReport",
]
