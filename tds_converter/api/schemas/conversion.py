"""
Conversion API Schemas

Response models for the upload, download and cleanup endpoints.
"""

from typing import Literal, Optional
from urllib.parse import quote

from pydantic import BaseModel, Field

from tds_converter.domain.conversion.value_objects.conversion_outcome import (
    ConversionOutcome,
    ConversionSuccess,
)


class ConversionResultItem(BaseModel):
    """
    Result of converting one uploaded file.

    Success items carry converted_name and download_url; error items carry
    a short message instead.
    """

    original_name: str = Field(description="File name as uploaded")
    status: Literal["success", "error"] = Field(description="Conversion status")
    converted_name: Optional[str] = Field(
        default=None, description="Stored workbook name (success only)"
    )
    download_url: Optional[str] = Field(
        default=None, description="One-shot download URL (success only)"
    )
    size_bytes: Optional[int] = Field(
        default=None, description="Workbook size in bytes (success only)", ge=0
    )
    rows: Optional[int] = Field(default=None, description="Rows written", ge=0)
    columns: Optional[int] = Field(default=None, description="Columns written", ge=0)
    message: Optional[str] = Field(
        default=None, description="Failure reason (error only)"
    )

    @classmethod
    def from_outcome(
        cls, outcome: ConversionOutcome, download_prefix: str = "/api/output/"
    ) -> "ConversionResultItem":
        """
        Build response item from a domain outcome.

        Args:
            outcome: ConversionSuccess or ConversionFailure
            download_prefix: URL prefix for the download endpoint

        Returns:
            ConversionResultItem
        """
        if isinstance(outcome, ConversionSuccess):
            return cls(
                original_name=outcome.display_name,
                status="success",
                converted_name=outcome.stored_name,
                download_url=f"{download_prefix}{quote(outcome.stored_name)}",
                size_bytes=outcome.size_bytes,
                rows=outcome.rows,
                columns=outcome.columns,
            )
        return cls(
            original_name=outcome.display_name,
            status="error",
            message=outcome.reason,
        )


class UploadResponse(BaseModel):
    """
    Response model for POST /api/upload.

    One item per uploaded file, in upload order.
    """

    results: list[ConversionResultItem] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "results": [
                    {
                        "original_name": "orders.tds",
                        "status": "success",
                        "converted_name": "orders.xlsx",
                        "download_url": "/api/output/orders.xlsx",
                        "size_bytes": 4987,
                        "rows": 12,
                        "columns": 5,
                    },
                    {
                        "original_name": "broken.tds",
                        "status": "error",
                        "message": "File is not valid UTF-8 text",
                    },
                ]
            }
        }


class CleanupResponse(BaseModel):
    """Response model for DELETE /api/cleanup."""

    message: str = "Output directory cleaned"
    deleted: int = Field(default=0, ge=0, description="Artifacts removed")
    failed: int = Field(default=0, ge=0, description="Artifacts that could not be removed")
