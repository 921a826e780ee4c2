"""
Conversion Domain Services

Exports:
    - DelimitedTextParser: bytes -> TabularGrid
    - WorkbookEncoderProtocol: TabularGrid -> bytes (implemented in Infrastructure)
    - derive_stored_name: uploaded filename -> artifact name
"""

from .delimited_parser import DelimitedTextParser, parse
from .stored_name import derive_stored_name, safe_basename
from .workbook_encoder import WorkbookEncoderProtocol

__all__ = [
    "DelimitedTextParser",
    "WorkbookEncoderProtocol",
    "derive_stored_name",
    "parse",
    "safe_basename",
]
