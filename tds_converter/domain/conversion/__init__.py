"""
Conversion Subdomain

Delimited-text parsing, workbook encoding contract and artifact naming.

Exports:
    - TabularGrid, RawInput, ConversionSuccess, ConversionFailure
    - DelimitedTextParser, WorkbookEncoderProtocol, derive_stored_name
"""

from .services import (
    DelimitedTextParser,
    WorkbookEncoderProtocol,
    derive_stored_name,
    parse,
)
from .value_objects import (
    ConversionFailure,
    ConversionOutcome,
    ConversionSuccess,
    RawInput,
    TabularGrid,
)

__all__ = [
    "ConversionFailure",
    "ConversionOutcome",
    "ConversionSuccess",
    "DelimitedTextParser",
    "RawInput",
    "TabularGrid",
    "WorkbookEncoderProtocol",
    "derive_stored_name",
    "parse",
]
