"""
Shared Domain Module

Shared domain concepts used across all layers.

This module exports:
    - DomainException and the converter error taxonomy
"""

from .exceptions import (
    ArtifactNotFoundError,
    DecodeError,
    DomainException,
    EmptyUploadError,
    EncodeError,
    FileSizeExceededError,
    StoreWriteError,
)

__all__ = [
    "ArtifactNotFoundError",
    "DecodeError",
    "DomainException",
    "EmptyUploadError",
    "EncodeError",
    "FileSizeExceededError",
    "StoreWriteError",
]
