"""
TDS Conversion Service

Single-file conversion: raw delimited bytes -> workbook bytes.

Responsibility:
    - Run DelimitedTextParser then the WorkbookEncoder on one input
    - Return the grid alongside the encoded bytes (for row/column counts)

Architecture Notes:
    - Part of Application Layer (Services)
    - Depends on Domain parser and WorkbookEncoderProtocol (injected)
    - Pure CPU work, no storage access; safe to run in worker threads
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from tds_converter.domain.conversion.services.delimited_parser import (
    DecodeErrorsMode,
    DelimitedTextParser,
)
from tds_converter.domain.conversion.services.workbook_encoder import (
    WorkbookEncoderProtocol,
)
from tds_converter.domain.conversion.value_objects.tabular_grid import TabularGrid
from tds_converter.infrastructure.file_storage.workbook_encoder import (
    WorkbookEncoderService,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConvertedWorkbook:
    """
    Result of converting one file.

    Attributes:
        grid: Parsed rectangular grid
        data: Encoded .xlsx content
    """

    grid: TabularGrid
    data: bytes = field(repr=False)

    @property
    def size_bytes(self) -> int:
        return len(self.data)


class TdsConversionService:
    """
    Converts caret-delimited text into an .xlsx workbook.

    Examples:
        >>> service = TdsConversionService()
        >>> result = service.convert(b"a^b^c\\nd^e")
        >>> result.grid.to_lists()
        [['a', 'b', 'c'], ['d', 'e', '']]
    """

    def __init__(
        self,
        parser: Optional[DelimitedTextParser] = None,
        encoder: Optional[WorkbookEncoderProtocol] = None,
        decode_errors: DecodeErrorsMode = "strict",
    ) -> None:
        """
        Initialize conversion service.

        Args:
            parser: Delimited text parser (default: caret parser)
            encoder: Workbook encoder (default: openpyxl WorkbookEncoderService)
            decode_errors: Decoding mode for the default parser
        """
        self.parser = parser or DelimitedTextParser(decode_errors=decode_errors)
        self.encoder = encoder or WorkbookEncoderService()

    def convert(self, data: bytes) -> ConvertedWorkbook:
        """
        Convert one file.

        Args:
            data: Raw delimited text

        Returns:
            ConvertedWorkbook with grid and .xlsx bytes

        Raises:
            DecodeError: If data is not valid UTF-8 (strict mode)
            EncodeError: If the workbook cannot be produced
        """
        grid = self.parser.parse(data)
        workbook_data = self.encoder.encode(grid)
        return ConvertedWorkbook(grid=grid, data=workbook_data)
