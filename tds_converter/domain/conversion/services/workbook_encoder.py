"""
WorkbookEncoder Protocol

Contract for turning a TabularGrid into a spreadsheet byte stream.

Architecture Notes:
    - Domain Service protocol (structural typing for Dependency Injection)
    - Implementation in Infrastructure layer (depends on openpyxl)
    - Encoders must write every cell as text and never infer formulas,
      numbers or headers
"""

from typing import Protocol

from ..value_objects.tabular_grid import TabularGrid


class WorkbookEncoderProtocol(Protocol):
    """
    Protocol for single-sheet workbook encoders.

    Implementations produce a standalone workbook with exactly one sheet,
    preserving row and column order of the grid.
    """

    def encode(self, grid: TabularGrid) -> bytes:
        """
        Encode grid as workbook bytes.

        Args:
            grid: Rectangular grid of text cells

        Returns:
            Workbook file content

        Raises:
            EncodeError: If the workbook cannot be produced
        """
        ...
