"""
Application Configuration

Runtime settings for the TDS converter, read from environment variables.
A .env file in the working directory is loaded first (python-dotenv).

Environment Variables:
    TDS_OUTPUT_DIR                 Artifact directory (default: <tmp>/tds_converter/output)
    TDS_MAX_FILE_SIZE_MB           Per-file upload limit in MB (default: 10)
    TDS_MAX_WORKERS                Parallel conversions per batch (default: 4)
    TDS_ARCHIVE_COMPRESSION_LEVEL  zlib level for zip downloads (default: 9)
    TDS_DECODE_ERRORS              "strict" or "replace" (default: strict)
    TDS_STORE_BACKEND              "filesystem" or "memory" (default: filesystem)
    TDS_PURGE_ON_SHUTDOWN          Delete artifacts on shutdown (default: false)
    TDS_LOG_LEVEL                  Logging level (default: INFO)
"""

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, Literal

from dotenv import load_dotenv

DEFAULT_OUTPUT_DIR: Final[Path] = Path(tempfile.gettempdir()) / "tds_converter" / "output"
DEFAULT_MAX_FILE_SIZE_MB: Final[int] = 10
DEFAULT_MAX_WORKERS: Final[int] = 4
DEFAULT_COMPRESSION_LEVEL: Final[int] = 9

TRUTHY_VALUES: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in TRUTHY_VALUES


@dataclass(frozen=True)
class Settings:
    """
    Immutable application settings.

    Use Settings.from_env() in the application; construct directly in tests.

    Attributes:
        output_dir: Directory of the file system artifact store
        max_file_size_mb: Upload limit per file
        max_workers: Files converted in parallel within one upload
        archive_compression_level: zlib level (0-9) for bulk downloads
        decode_errors: UTF-8 decoding mode for uploads
        store_backend: Artifact store implementation
        purge_on_shutdown: Remove remaining artifacts when the app stops
        log_level: Root logging level name

    Examples:
        >>> settings = Settings(max_file_size_mb=1, store_backend="memory")
        >>> settings.max_file_size_bytes
        1048576
    """

    output_dir: Path = field(default=DEFAULT_OUTPUT_DIR)
    max_file_size_mb: int = DEFAULT_MAX_FILE_SIZE_MB
    max_workers: int = DEFAULT_MAX_WORKERS
    archive_compression_level: int = DEFAULT_COMPRESSION_LEVEL
    decode_errors: Literal["strict", "replace"] = "strict"
    store_backend: Literal["filesystem", "memory"] = "filesystem"
    purge_on_shutdown: bool = False
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        """
        Validate settings values.

        Raises:
            ValueError: If any value is out of range
        """
        if self.max_file_size_mb <= 0:
            raise ValueError(f"max_file_size_mb must be positive, got {self.max_file_size_mb}")
        if self.max_workers <= 0:
            raise ValueError(f"max_workers must be positive, got {self.max_workers}")
        if not 0 <= self.archive_compression_level <= 9:
            raise ValueError(
                "archive_compression_level must be between 0 and 9, "
                f"got {self.archive_compression_level}"
            )
        if self.decode_errors not in ("strict", "replace"):
            raise ValueError(f"Unknown decode_errors mode: {self.decode_errors!r}")
        if self.store_backend not in ("filesystem", "memory"):
            raise ValueError(f"Unknown store_backend: {self.store_backend!r}")

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables (after loading .env).

        Raises:
            ValueError: If a variable holds an invalid value
        """
        load_dotenv()

        return cls(
            output_dir=Path(os.getenv("TDS_OUTPUT_DIR", str(DEFAULT_OUTPUT_DIR))),
            max_file_size_mb=int(
                os.getenv("TDS_MAX_FILE_SIZE_MB", str(DEFAULT_MAX_FILE_SIZE_MB))
            ),
            max_workers=int(os.getenv("TDS_MAX_WORKERS", str(DEFAULT_MAX_WORKERS))),
            archive_compression_level=int(
                os.getenv("TDS_ARCHIVE_COMPRESSION_LEVEL", str(DEFAULT_COMPRESSION_LEVEL))
            ),
            decode_errors=os.getenv("TDS_DECODE_ERRORS", "strict").strip().lower(),
            store_backend=os.getenv("TDS_STORE_BACKEND", "filesystem").strip().lower(),
            purge_on_shutdown=_env_bool("TDS_PURGE_ON_SHUTDOWN", False),
            log_level=os.getenv("TDS_LOG_LEVEL", "INFO").strip().upper(),
        )
