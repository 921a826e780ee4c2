"""
Artifact Store Port

Protocol definitions and result types for the artifact store.
Infrastructure Layer implements ArtifactStoreProtocol
(FileSystemArtifactStore, InMemoryArtifactStore).

Lifecycle of an artifact:
    put() -> [checkout() -> complete()]       individual download, then delete
          -> [checkout_archive() -> complete()] bulk download, then delete
          -> delete_all()                       explicit cleanup

A lease that is released instead of completed leaves the artifact in place,
so an interrupted download can be retried.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Protocol


class ArchiveWarningKind(str, Enum):
    """
    Recoverable reasons for skipping an artifact during archive build.

    Attributes:
        MISSING: Artifact vanished between snapshot and inclusion
        BUSY: Artifact is being downloaded by a concurrent request
        UNREADABLE: Artifact exists but could not be read
    """

    MISSING = "missing"
    BUSY = "busy"
    UNREADABLE = "unreadable"


@dataclass(frozen=True)
class ArchiveWarning:
    """
    One artifact skipped while building an archive.

    Warnings never fail the archive; they are logged and reported to the
    caller (X-Archive-Skipped header).
    """

    name: str
    kind: ArchiveWarningKind
    detail: str = ""


@dataclass(frozen=True)
class CleanupReport:
    """
    Result of delete_all().

    Attributes:
        deleted: Names removed from the store
        failures: Name -> error message for artifacts that could not be removed
    """

    deleted: list[str] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def deleted_count(self) -> int:
        return len(self.deleted)

    @property
    def failed_count(self) -> int:
        return len(self.failures)


class ArtifactLeaseProtocol(Protocol):
    """Reserved artifact being delivered to one caller."""

    name: str
    data: bytes

    @property
    def size_bytes(self) -> int:
        ...

    def iter_chunks(self, chunk_size: int = ...) -> Iterator[bytes]:
        ...

    def complete(self) -> bool:
        """Transfer finished: delete the artifact. Returns True if deleted."""
        ...

    def release(self) -> None:
        """Transfer aborted: keep the artifact for a retry."""
        ...


class ArchiveLeaseProtocol(ArtifactLeaseProtocol, Protocol):
    """Zip archive built over a snapshot of the store."""

    included: list[str]
    warnings: list[ArchiveWarning]


class ArtifactStoreProtocol(Protocol):
    """
    Protocol for the artifact store.

    Used by ConvertBatchUseCase (put) and the output router
    (checkout, checkout_archive, delete_all).

    Concurrency contract:
        - put() on distinct names never interfere
        - An artifact is handed out by at most one lease at a time; competing
          checkouts raise ArtifactNotFoundError
        - Archives work on the name snapshot taken at call time
    """

    def put(self, name: str, data: bytes) -> None:
        """Store data under name (last write wins). Raises StoreWriteError."""
        ...

    def get_once(self, name: str) -> bytes:
        """Return data and delete the artifact. Raises ArtifactNotFoundError."""
        ...

    def checkout(self, name: str) -> ArtifactLeaseProtocol:
        """Reserve artifact for streaming. Raises ArtifactNotFoundError."""
        ...

    def list(self) -> set[str]:
        """Names of all current artifacts."""
        ...

    def archive_all(self) -> ArchiveLeaseProtocol:
        """Zip every artifact and delete the included ones."""
        ...

    def checkout_archive(self) -> ArchiveLeaseProtocol:
        """Zip every artifact; deletion deferred until complete()."""
        ...

    def delete_all(self) -> CleanupReport:
        """Remove every artifact. Never raises."""
        ...

    def close(self) -> None:
        """Release resources on application shutdown."""
        ...
