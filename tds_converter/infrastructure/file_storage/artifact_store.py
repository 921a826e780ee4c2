"""
Artifact Store

Holds converted workbooks until they are downloaded, archived or cleaned up.

Responsibility:
    - Store artifacts by name (last write wins, atomic on disk)
    - Deliver each artifact at most once, deleting it after a completed transfer
    - Build zip archives over a snapshot of all artifacts
    - Bulk cleanup with per-item error collection
    - Implements ArtifactStoreProtocol from Application Layer

Architecture Notes:
    - Infrastructure Layer (file system + zipfile)
    - One threading.Lock guards the name-keyed state (leases, generations);
      file contents are read and written outside the lock
    - Two backends share the locking core (BaseArtifactStore):
        * FileSystemArtifactStore - scoped output directory (production)
        * InMemoryArtifactStore - dict of bytes (tests, ephemeral deployments)

Storage Structure (FileSystemArtifactStore):
    {root_dir}/{stored_name}            committed artifacts
    {root_dir}/.staging/{uuid}.tmp      in-flight writes (renamed on commit)
"""

from __future__ import annotations

import io
import logging
import os
import shutil
import threading
import zipfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterator, Optional
from uuid import uuid4

from tds_converter.application.ports.artifact_store import (
    ArchiveWarning,
    ArchiveWarningKind,
    CleanupReport,
)
from tds_converter.domain.shared.exceptions import (
    ArtifactNotFoundError,
    EncodeError,
    StoreWriteError,
)

# Configure logger for artifact store operations
logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024
MAX_NAME_LENGTH = 255


def is_valid_artifact_name(name: str) -> bool:
    """
    Check that name is a plain file name.

    Examples:
        >>> is_valid_artifact_name("report.xlsx")
        True
        >>> is_valid_artifact_name("../etc/passwd")
        False
    """
    if not name or len(name) > MAX_NAME_LENGTH:
        return False
    if name in (".", ".."):
        return False
    return not any(char in name for char in ("/", "\\", "\x00"))


# ============================================================================
# LEASES
# ============================================================================


class ArtifactLease:
    """
    Reservation of one artifact while it is being delivered.

    While a lease is open no other checkout (or archive) can take the same
    artifact. The holder settles the lease exactly once:
    - complete(): transfer finished, artifact is deleted
    - release(): transfer interrupted, artifact stays for a retry

    Used as a context manager, an unsettled lease is released on exit.

    Examples:
        >>> with store.checkout("report.xlsx") as lease:
        ...     send(lease.data)
        ...     lease.complete()
    """

    def __init__(
        self, store: "BaseArtifactStore", name: str, data: bytes, generation: int
    ) -> None:
        self._store = store
        self._generation = generation
        self._settled = False
        self.name = name
        self.data = data

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    @property
    def is_settled(self) -> bool:
        return self._settled

    def iter_chunks(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
        """Yield the artifact content in chunks of at most chunk_size bytes."""
        view = memoryview(self.data)
        for offset in range(0, len(view), chunk_size):
            yield bytes(view[offset : offset + chunk_size])

    def complete(self) -> bool:
        """
        Mark transfer as finished and delete the artifact.

        Returns:
            True if the artifact was deleted, False if deletion was skipped
            (already settled, replaced by a newer put, or cleanup failed)
        """
        if self._settled:
            return False
        self._settled = True
        return self._store._settle(self.name, self._generation, delete=True)

    def release(self) -> None:
        """Return the artifact to the store without deleting it."""
        if self._settled:
            return
        self._settled = True
        self._store._settle(self.name, self._generation, delete=False)

    def __enter__(self) -> "ArtifactLease":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.release()


class ArchiveLease:
    """
    Zip archive built over a snapshot of the store.

    Holds a lease on every included artifact. complete() deletes all of
    them, release() returns all of them to the store.

    Attributes:
        name: Suggested archive name (set by the caller, default "archive.zip")
        data: Finalized zip content
        included: Stored names written into the archive, in archive order
        warnings: Artifacts skipped during the build (never fatal)
    """

    def __init__(
        self,
        store: "BaseArtifactStore",
        data: bytes,
        members: list[tuple[str, int]],
        warnings: list[ArchiveWarning],
    ) -> None:
        self._store = store
        self._members = members
        self._settled = False
        self.name = "archive.zip"
        self.data = data
        self.included = [member_name for member_name, _ in members]
        self.warnings = warnings

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    @property
    def is_settled(self) -> bool:
        return self._settled

    def iter_chunks(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
        """Yield the archive content in chunks of at most chunk_size bytes."""
        view = memoryview(self.data)
        for offset in range(0, len(view), chunk_size):
            yield bytes(view[offset : offset + chunk_size])

    def complete(self) -> bool:
        """
        Delete every included artifact.

        Returns:
            True if all included artifacts were deleted
        """
        if self._settled:
            return False
        self._settled = True
        results = [
            self._store._settle(member_name, generation, delete=True)
            for member_name, generation in self._members
        ]
        return all(results)

    def release(self) -> None:
        """Return every included artifact to the store."""
        if self._settled:
            return
        self._settled = True
        for member_name, generation in self._members:
            self._store._settle(member_name, generation, delete=False)

    def __enter__(self) -> "ArchiveLease":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.release()


# ============================================================================
# STORE CORE
# ============================================================================


class BaseArtifactStore(ABC):
    """
    Backend-independent artifact store logic.

    Subclasses provide raw storage primitives (_stage, _commit, _read,
    _remove, _exists, _names). This class adds name validation, leases,
    write generations and archive building on top of them.

    Generations:
        Every committed put() increments the generation of its name. A lease
        remembers the generation it was taken at and only deletes the
        artifact if no newer put() replaced it meanwhile.
    """

    def __init__(self, compression_level: int = 9) -> None:
        if not 0 <= compression_level <= 9:
            raise ValueError(
                f"compression_level must be between 0 and 9, got {compression_level}"
            )
        self.compression_level = compression_level
        self._lock = threading.Lock()
        self._leased: set[str] = set()
        self._generations: dict[str, int] = {}

    # ------------------------------------------------------------------
    # Storage primitives
    # ------------------------------------------------------------------

    @abstractmethod
    def _stage(self, name: str, data: bytes) -> Any:
        """Prepare data for commit outside the lock; returns a commit token."""

    @abstractmethod
    def _commit(self, name: str, token: Any) -> None:
        """Atomically publish staged data under name (called with lock held)."""

    def _discard(self, token: Any) -> None:
        """Drop staged data after a failed commit."""

    @abstractmethod
    def _read(self, name: str) -> bytes:
        """Return artifact content. Raises FileNotFoundError if absent."""

    @abstractmethod
    def _remove(self, name: str) -> None:
        """Delete artifact. Raises FileNotFoundError if absent."""

    @abstractmethod
    def _exists(self, name: str) -> bool:
        """True if artifact is present."""

    @abstractmethod
    def _names(self) -> set[str]:
        """Names of all present artifacts."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def put(self, name: str, data: bytes) -> None:
        """
        Store artifact, replacing any artifact with the same name.

        Args:
            name: Plain file name (no directory part)
            data: Artifact content

        Raises:
            StoreWriteError: If name is invalid or data cannot be persisted
        """
        if not is_valid_artifact_name(name):
            raise StoreWriteError("Invalid artifact name", name=repr(name))

        try:
            token = self._stage(name, data)
        except OSError as e:
            raise StoreWriteError(f"Cannot write artifact: {e}", name=name) from e

        try:
            with self._lock:
                self._commit(name, token)
                self._generations[name] = self._generations.get(name, 0) + 1
        except OSError as e:
            self._discard(token)
            raise StoreWriteError(f"Cannot commit artifact: {e}", name=name) from e

        logger.info(f"Stored artifact: {name} ({len(data)} bytes)")

    def checkout(self, name: str) -> ArtifactLease:
        """
        Reserve artifact for delivery.

        Args:
            name: Stored artifact name

        Returns:
            ArtifactLease holding the artifact content

        Raises:
            ArtifactNotFoundError: If the artifact does not exist or another
                request is delivering it right now
        """
        if not is_valid_artifact_name(name):
            raise ArtifactNotFoundError("File not found", name=name)

        with self._lock:
            if name in self._leased or not self._exists(name):
                raise ArtifactNotFoundError("File not found", name=name)
            self._leased.add(name)
            generation = self._generations.get(name, 0)

        try:
            data = self._read(name)
        except OSError as e:
            with self._lock:
                self._leased.discard(name)
            raise ArtifactNotFoundError("File not found", name=name) from e

        return ArtifactLease(self, name, data, generation)

    def get_once(self, name: str) -> bytes:
        """
        Return artifact content and delete the artifact.

        Raises:
            ArtifactNotFoundError: If the artifact does not exist
        """
        lease = self.checkout(name)
        lease.complete()
        return lease.data

    def list(self) -> set[str]:
        """Names of all current artifacts (including ones being delivered)."""
        with self._lock:
            return set(self._names())

    def checkout_archive(self) -> ArchiveLease:
        """
        Build a zip archive of every current artifact.

        Process Flow:
            1. Snapshot artifact names
            2. Lease and read each artifact; skip (with warning) artifacts that
               are gone, busy or unreadable
            3. Write each into the zip under its stored name (deflate, level 9)
            4. Finalize the zip and return an ArchiveLease

        Returns:
            ArchiveLease; artifacts are deleted only on complete()

        Raises:
            ArtifactNotFoundError: If the store is empty or every artifact
                was skipped (no empty archive is produced)
            EncodeError: If the zip cannot be written (all leases released)
        """
        with self._lock:
            snapshot = sorted(self._names())

        if not snapshot:
            raise ArtifactNotFoundError("No files available for download")

        members: list[tuple[str, int]] = []
        warnings: list[ArchiveWarning] = []
        buffer = io.BytesIO()

        try:
            with zipfile.ZipFile(
                buffer,
                mode="w",
                compression=zipfile.ZIP_DEFLATED,
                compresslevel=self.compression_level,
            ) as archive:
                for name in snapshot:
                    leased = self._lease_for_archive(name, warnings)
                    if leased is None:
                        continue
                    data, generation = leased
                    members.append((name, generation))
                    archive.writestr(name, data)
        except (OSError, ValueError, MemoryError, zipfile.BadZipFile) as e:
            for name, generation in members:
                self._settle(name, generation, delete=False)
            raise EncodeError("Failed to create ZIP file", original_error=e) from e

        for warning in warnings:
            logger.warning(
                f"Archive warning: skipped {warning.name} ({warning.kind.value}) {warning.detail}".rstrip()
            )

        if not members:
            raise ArtifactNotFoundError("No files available for download")

        logger.info(
            f"Built archive with {len(members)} files "
            f"({buffer.getbuffer().nbytes} bytes, {len(warnings)} skipped)"
        )
        return ArchiveLease(self, buffer.getvalue(), members, warnings)

    def archive_all(self) -> ArchiveLease:
        """
        Build archive of every artifact and delete the included artifacts.

        Returns:
            Settled ArchiveLease (data, included, warnings)

        Raises:
            ArtifactNotFoundError: If the store is empty
            EncodeError: If the zip cannot be written
        """
        bundle = self.checkout_archive()
        bundle.complete()
        return bundle

    def delete_all(self) -> CleanupReport:
        """
        Remove every artifact (best effort).

        Per-item failures are collected and logged; the batch continues.

        Returns:
            CleanupReport with deleted names and failures
        """
        with self._lock:
            names = sorted(self._names())

        report = CleanupReport()
        for name in names:
            try:
                with self._lock:
                    self._remove(name)
                    self._forget(name)
            except FileNotFoundError:
                # Delivered or archived concurrently
                continue
            except OSError as e:
                logger.error(f"Failed to cleanup {name}: {e}")
                report.failures[name] = str(e)
                continue
            report.deleted.append(name)
            logger.info(f"Cleaned up file: {name}")

        logger.info(
            f"Cleanup finished: {report.deleted_count} deleted, "
            f"{report.failed_count} failed"
        )
        return report

    def close(self) -> None:
        """Release resources on shutdown (no-op by default)."""

    # ------------------------------------------------------------------
    # Lease bookkeeping
    # ------------------------------------------------------------------

    def _lease_for_archive(
        self, name: str, warnings: list[ArchiveWarning]
    ) -> Optional[tuple[bytes, int]]:
        """Lease and read one artifact for an archive; None if skipped."""
        with self._lock:
            if name in self._leased:
                warnings.append(ArchiveWarning(name, ArchiveWarningKind.BUSY))
                return None
            if not self._exists(name):
                warnings.append(ArchiveWarning(name, ArchiveWarningKind.MISSING))
                return None
            self._leased.add(name)
            generation = self._generations.get(name, 0)

        try:
            return self._read(name), generation
        except FileNotFoundError:
            warnings.append(ArchiveWarning(name, ArchiveWarningKind.MISSING))
        except OSError as e:
            warnings.append(ArchiveWarning(name, ArchiveWarningKind.UNREADABLE, str(e)))

        with self._lock:
            self._leased.discard(name)
        return None

    def _settle(self, name: str, generation: int, delete: bool) -> bool:
        """
        Finish a lease.

        Cleanup failures after a completed transfer are logged, not raised:
        the delivery already succeeded from the caller's point of view.

        Returns:
            True if the artifact was deleted
        """
        with self._lock:
            self._leased.discard(name)
            if not delete:
                logger.info(f"Released artifact without delivery: {name}")
                if not self._exists(name):
                    self._forget(name)
                return False

            if self._generations.get(name, 0) != generation:
                logger.info(f"Artifact {name} was replaced during delivery, keeping it")
                return False

            try:
                self._remove(name)
            except FileNotFoundError:
                logger.debug(f"Artifact {name} already removed")
                self._forget(name)
                return False
            except OSError as e:
                logger.warning(f"Failed to cleanup {name}: {e}")
                return False
            self._forget(name)

        logger.info(f"Cleaned up downloaded file: {name}")
        return True

    def _forget(self, name: str) -> None:
        """
        Drop the write generation of a removed artifact (lock held).

        A leased name keeps its entry so the open lease still sees any
        newer put() as a different generation.
        """
        if name not in self._leased:
            self._generations.pop(name, None)


# ============================================================================
# BACKENDS
# ============================================================================


class FileSystemArtifactStore(BaseArtifactStore):
    """
    Artifact store backed by a scoped output directory.

    Files already present in root_dir at startup are treated as artifacts,
    so results survive a restart until they are downloaded or cleaned up.

    Examples:
        >>> store = FileSystemArtifactStore(Path("/tmp/tds_converter/output"))
        >>> store.put("report.xlsx", workbook_bytes)
        >>> store.list()
        {'report.xlsx'}
        >>> data = store.get_once("report.xlsx")
    """

    STAGING_DIR_NAME = ".staging"

    def __init__(
        self,
        root_dir: Path | str,
        compression_level: int = 9,
        purge_on_close: bool = False,
    ) -> None:
        """
        Initialize store and create its directories.

        Args:
            root_dir: Directory holding artifacts
            compression_level: zlib level for archives (0-9)
            purge_on_close: Delete all artifacts in close()

        Raises:
            OSError: If directories cannot be created
        """
        super().__init__(compression_level=compression_level)
        self.root_dir = Path(root_dir)
        self.staging_dir = self.root_dir / self.STAGING_DIR_NAME
        self.purge_on_close = purge_on_close

        self.root_dir.mkdir(parents=True, exist_ok=True)
        self.staging_dir.mkdir(parents=True, exist_ok=True)

        logger.info(f"File system artifact store ready at {self.root_dir}")

    def _path(self, name: str) -> Path:
        return self.root_dir / name

    def _stage(self, name: str, data: bytes) -> Path:
        staged_path = self.staging_dir / f"{uuid4().hex}.tmp"
        staged_path.write_bytes(data)
        self._set_permissions(staged_path, 0o644)
        return staged_path

    def _commit(self, name: str, token: Path) -> None:
        os.replace(token, self._path(name))

    def _discard(self, token: Path) -> None:
        try:
            token.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove staged file {token}: {e}")

    def _read(self, name: str) -> bytes:
        return self._path(name).read_bytes()

    def _remove(self, name: str) -> None:
        self._path(name).unlink()

    def _exists(self, name: str) -> bool:
        return self._path(name).is_file()

    def _names(self) -> set[str]:
        return {path.name for path in self.root_dir.iterdir() if path.is_file()}

    @staticmethod
    def _set_permissions(path: Path, mode: int) -> None:
        """Set file permissions; ignored where chmod is unsupported."""
        try:
            os.chmod(path, mode)
        except (OSError, NotImplementedError):
            logger.debug(f"Could not set permissions on {path}")

    def close(self) -> None:
        """
        Shut the store down.

        Removes leftover staged writes and, with purge_on_close, every artifact.
        """
        if self.purge_on_close:
            self.delete_all()
        shutil.rmtree(self.staging_dir, ignore_errors=True)
        logger.info(f"File system artifact store closed ({self.root_dir})")


class InMemoryArtifactStore(BaseArtifactStore):
    """
    Artifact store keeping artifacts in a dict.

    Same semantics as FileSystemArtifactStore; contents are lost on restart.
    """

    def __init__(self, compression_level: int = 9) -> None:
        super().__init__(compression_level=compression_level)
        self._blobs: dict[str, bytes] = {}

    def _stage(self, name: str, data: bytes) -> bytes:
        return bytes(data)

    def _commit(self, name: str, token: bytes) -> None:
        self._blobs[name] = token

    def _read(self, name: str) -> bytes:
        try:
            return self._blobs[name]
        except KeyError:
            raise FileNotFoundError(name) from None

    def _remove(self, name: str) -> None:
        try:
            del self._blobs[name]
        except KeyError:
            raise FileNotFoundError(name) from None

    def _exists(self, name: str) -> bool:
        return name in self._blobs

    def _names(self) -> set[str]:
        return set(self._blobs)

    def close(self) -> None:
        with self._lock:
            self._blobs.clear()
