"""
Domain Layer Exceptions

This module defines the exception hierarchy shared by every layer of the
TDS converter. All domain-specific exceptions inherit from DomainException.

Responsibility:
    - Base exception class for domain errors
    - Typed errors for each stage of the conversion pipeline
    - Clear separation from framework exceptions (FastAPI, openpyxl, OSError)

Taxonomy:
    - DecodeError: Uploaded bytes are not valid UTF-8 text
    - EncodeError: Workbook or archive could not be produced
    - StoreWriteError: Artifact could not be persisted
    - ArtifactNotFoundError: Retrieval / archive target is absent
    - FileSizeExceededError: Upload rejected at intake (size limit)
    - EmptyUploadError: Upload request carried no files

Architecture Notes:
    - Part of Shared Domain (used across all subdomains)
    - Per-file errors (Decode/Encode/StoreWrite) are captured by the batch
      use case into a Failure outcome and never reach the HTTP layer
    - ArtifactNotFoundError, FileSizeExceededError and EmptyUploadError are
      request-level errors mapped to HTTP status codes in api/main.py
"""


class DomainException(Exception):
    """
    Base exception for all domain layer errors.

    All converter exceptions inherit from this class to enable type-safe
    error handling in Application and API layers.

    Usage:
        - Catch this in Application Layer to handle all domain errors
        - API Layer converts to appropriate HTTP status codes

    Examples:
        >>> raise DomainException("Business rule violation")

        >>> try:
        ...     # domain operation
        ... except DomainException as e:
        ...     logger.error(f"Domain error: {e}")
    """

    def __init__(self, message: str) -> None:
        """
        Initialize domain exception with error message.

        Args:
            message: Human-readable error description
        """
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        """String representation of the exception."""
        return f"{self.__class__.__name__}: {self.message}"

    def __repr__(self) -> str:
        """Developer-friendly representation."""
        return f"{self.__class__.__name__}(message={self.message!r})"


class DecodeError(DomainException):
    """
    Raised when uploaded bytes cannot be decoded as UTF-8 text.

    Only raised in strict decoding mode (TDS_DECODE_ERRORS=strict). In
    replace mode undecodable sequences become U+FFFD and parsing never fails.

    Attributes:
        position: Byte offset of the first invalid sequence (optional)

    Examples:
        >>> raise DecodeError("Input is not valid UTF-8 text", position=17)
    """

    def __init__(self, message: str, position: int | None = None) -> None:
        """
        Initialize decode error.

        Args:
            message: Error description
            position: Byte offset where decoding failed (optional)
        """
        self.position = position
        if position is not None:
            super().__init__(f"{message} (byte {position})")
        else:
            super().__init__(message)


class EncodeError(DomainException):
    """
    Raised when a workbook or zip archive cannot be produced.

    Wraps the original openpyxl / zipfile exception so that callers only
    need to handle domain exceptions.

    Attributes:
        original_error: Exception raised by the underlying library (optional)

    Examples:
        >>> raise EncodeError(
        ...     "Cannot build workbook",
        ...     original_error=MemoryError(),
        ... )
    """

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        """
        Initialize encode error.

        Args:
            message: Error description
            original_error: Original exception from openpyxl or zipfile (optional)
        """
        self.original_error = original_error
        if original_error is not None:
            super().__init__(
                f"{message} | Original error: "
                f"{type(original_error).__name__}: {original_error}"
            )
        else:
            super().__init__(message)


class StoreWriteError(DomainException):
    """
    Raised when an artifact cannot be written to the artifact store.

    This exception is raised when:
    - The artifact name is empty or contains a path component
    - The output directory is not writable (permissions, disk full)

    Attributes:
        name: Artifact name that failed to persist

    Examples:
        >>> raise StoreWriteError("Disk full", name="report.xlsx")
    """

    def __init__(self, message: str, name: str | None = None) -> None:
        """
        Initialize store write error.

        Args:
            message: Error description
            name: Artifact name (optional)
        """
        self.name = name
        if name:
            super().__init__(f"{message} (artifact: {name})")
        else:
            super().__init__(message)


class ArtifactNotFoundError(DomainException):
    """
    Raised when a retrieval or archive target does not exist.

    This exception is raised when:
    - get_once/checkout targets a name that was never stored
    - The artifact was already delivered (at-most-once delivery)
    - A concurrent request currently holds the artifact
    - archive_all is called on an empty store

    Attributes:
        name: Missing artifact name (None for archive requests)

    Examples:
        >>> raise ArtifactNotFoundError("File not found", name="report.xlsx")
        >>> raise ArtifactNotFoundError("No files available for download")
    """

    def __init__(self, message: str, name: str | None = None) -> None:
        """
        Initialize not found error.

        Args:
            message: Error description
            name: Artifact name that was requested (optional)
        """
        self.name = name
        super().__init__(message)


class FileSizeExceededError(DomainException):
    """
    Raised when an uploaded file exceeds the allowed size limit.

    Raised by the upload router before any file reaches the orchestrator.

    Attributes:
        filename: Name of the offending upload (optional)
        file_size_bytes: Bytes received before the limit was hit (optional)
        max_size_bytes: Maximum allowed size in bytes (optional)

    Examples:
        >>> raise FileSizeExceededError(
        ...     "File exceeds upload limit",
        ...     filename="big.tds",
        ...     file_size_bytes=15 * 1024 * 1024,
        ...     max_size_bytes=10 * 1024 * 1024,
        ... )
    """

    def __init__(
        self,
        message: str,
        filename: str | None = None,
        file_size_bytes: int | None = None,
        max_size_bytes: int | None = None,
    ) -> None:
        """
        Initialize file size exceeded error.

        Args:
            message: Error description
            filename: Name of uploaded file (optional)
            file_size_bytes: Actual file size in bytes (optional)
            max_size_bytes: Maximum allowed size in bytes (optional)
        """
        self.filename = filename
        self.file_size_bytes = file_size_bytes
        self.max_size_bytes = max_size_bytes

        # Build detailed message with human-readable sizes
        if file_size_bytes and max_size_bytes:
            file_mb = file_size_bytes / (1024 * 1024)
            max_mb = max_size_bytes / (1024 * 1024)
            super().__init__(f"{message} (File: {file_mb:.2f}MB, Max: {max_mb:.2f}MB)")
        else:
            super().__init__(message)


class EmptyUploadError(DomainException):
    """
    Raised when an upload request contains no files.

    Examples:
        >>> raise EmptyUploadError("No files uploaded")
    """
