"""
Workbook Encoder Service

Encodes a TabularGrid as an .xlsx byte stream using the openpyxl library.

Responsibility:
    - Create a workbook with exactly one sheet named "Sheet1"
    - Write every grid cell as text, in grid order
    - Serialize the workbook to bytes in memory

Architecture Notes:
    - Infrastructure Layer (depends on openpyxl library)
    - Implements WorkbookEncoderProtocol from Domain Layer
    - Used by Application Layer (TdsConversionService)
    - No styles, no formulas, no header detection
"""

import io
import logging

from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from tds_converter.domain.conversion.constants import SHEET_NAME
from tds_converter.domain.conversion.value_objects.tabular_grid import TabularGrid
from tds_converter.domain.shared.exceptions import EncodeError

logger = logging.getLogger(__name__)


class WorkbookEncoderService:
    """
    Service for writing a TabularGrid to an Excel workbook.

    Output Excel Structure:
        - One worksheet named "Sheet1"
        - Grid row N -> worksheet row N (1-based), grid column M -> column M
        - Every cell stored with the string data type, so "007" stays "007"
          and "=SUM(A1)" stays literal text

    Examples:
        >>> encoder = WorkbookEncoderService()
        >>> grid = TabularGrid.from_ragged_rows([["a", "b"], ["c"]])
        >>> data = encoder.encode(grid)
        >>> data[:2]
        b'PK'
    """

    # openpyxl string data type
    TEXT_DATA_TYPE = "s"

    def __init__(self, sheet_name: str = SHEET_NAME) -> None:
        """
        Initialize workbook encoder.

        Args:
            sheet_name: Title of the single worksheet (default "Sheet1")
        """
        self.sheet_name = sheet_name

    def encode(self, grid: TabularGrid) -> bytes:
        """
        Encode grid as .xlsx bytes.

        Process Flow:
            1. Create workbook and rename its default sheet
            2. Write all rows as text cells
            3. Save workbook to an in-memory buffer
            4. Return buffer bytes

        Args:
            grid: Rectangular grid of text cells (may be empty)

        Returns:
            Complete .xlsx file content

        Raises:
            EncodeError: If openpyxl fails to build or serialize the workbook
        """
        try:
            workbook = self._create_workbook()
            self._write_rows(workbook.active, grid)
            data = self._save_workbook(workbook)
        except MemoryError as e:
            raise EncodeError("Not enough memory to build workbook", original_error=e) from e
        except (ValueError, TypeError, OSError) as e:
            raise EncodeError("Cannot build workbook", original_error=e) from e

        logger.debug(
            f"Encoded workbook: {grid.row_count} rows x {grid.width} columns, "
            f"{len(data)} bytes"
        )
        return data

    def _create_workbook(self) -> Workbook:
        """
        Create a workbook holding a single, empty, correctly named sheet.

        Returns:
            openpyxl Workbook object
        """
        workbook = Workbook()
        workbook.active.title = self.sheet_name
        return workbook

    def _write_rows(self, worksheet: Worksheet, grid: TabularGrid) -> None:
        """
        Write grid rows to worksheet as text cells.

        openpyxl marks strings starting with "=" as formulas on assignment,
        so the data type is reset to text after every write.

        Args:
            worksheet: openpyxl Worksheet to fill
            grid: Source grid
        """
        for row_index, row in enumerate(grid.rows, start=1):
            for column_index, value in enumerate(row, start=1):
                # openpyxl uses 1-based indexing for both row and column
                cell = worksheet.cell(
                    row=row_index,
                    column=column_index,
                    value=self._sanitize(value),
                )
                cell.data_type = self.TEXT_DATA_TYPE

    @staticmethod
    def _sanitize(value: str) -> str:
        """
        Remove characters that cannot be stored in workbook XML.

        Examples:
            >>> WorkbookEncoderService._sanitize("a\\x00b")
            'ab'
        """
        return ILLEGAL_CHARACTERS_RE.sub("", value)

    def _save_workbook(self, workbook: Workbook) -> bytes:
        """
        Serialize workbook to bytes.

        Args:
            workbook: openpyxl Workbook to save

        Returns:
            .xlsx file content
        """
        buffer = io.BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()
