"""
ConversionOutcome Value Objects.

Tagged result of converting one uploaded file: either ConversionSuccess
(artifact stored) or ConversionFailure (nothing stored). The batch use
case returns one outcome per input, in input order.

Architecture Notes:
    - Value Objects (immutable frozen dataclasses)
    - `status` is the tag used by the API Layer ("success" / "error")
    - A failure never leaves a partial artifact behind
"""

from dataclasses import dataclass, field
from typing import Literal, Union


@dataclass(frozen=True)
class ConversionSuccess:
    """
    File converted and stored as an artifact.

    Attributes:
        display_name: Original filename from the client
        stored_name: Artifact name in the store (e.g. "report.xlsx")
        size_bytes: Size of the produced workbook in bytes
        rows: Number of rows written to the sheet
        columns: Number of columns written to the sheet

    Examples:
        >>> outcome = ConversionSuccess("report.tds", "report.xlsx", 4810, 3, 3)
        >>> outcome.succeeded
        True
    """

    display_name: str
    stored_name: str
    size_bytes: int
    rows: int = 0
    columns: int = 0

    status: Literal["success"] = field(default="success", init=False)

    @property
    def succeeded(self) -> bool:
        return True


@dataclass(frozen=True)
class ConversionFailure:
    """
    File could not be converted; no artifact was stored.

    Attributes:
        display_name: Original filename from the client
        reason: Short human-readable reason (shown to the user)

    Examples:
        >>> outcome = ConversionFailure("broken.tds", "Conversion failed")
        >>> outcome.succeeded
        False
    """

    display_name: str
    reason: str

    status: Literal["error"] = field(default="error", init=False)

    @property
    def succeeded(self) -> bool:
        return False


ConversionOutcome = Union[ConversionSuccess, ConversionFailure]
