"""
API Schemas Package

Contains shared Pydantic models for API Layer.
"""

from tds_converter.api.schemas.common import ErrorResponse
from tds_converter.api.schemas.conversion import (
    CleanupResponse,
    ConversionResultItem,
    UploadResponse,
)

__all__ = ["CleanupResponse", "ConversionResultItem", "ErrorResponse", "UploadResponse"]
