"""
TabularGrid Value Object.

Rectangular grid of string cells produced by the delimited-text parser
and consumed by the workbook encoder.

This is an immutable Value Object following DDD principles.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence

from tds_converter.domain.conversion.constants import PAD_VALUE


@dataclass(frozen=True)
class TabularGrid:
    """
    Immutable rectangular grid of text cells.

    Every row has exactly `width` cells. Ragged input is normalised with
    TabularGrid.from_ragged_rows(), which right-pads short rows with empty
    strings (never truncates). A grid with zero rows is legal.

    Attributes:
        rows: Tuple of rows, each a tuple of str cells

    Examples:
        >>> grid = TabularGrid.from_ragged_rows([["a", "b", "c"], ["d", "e"]])
        >>> grid.rows
        (('a', 'b', 'c'), ('d', 'e', ''))
        >>> grid.width
        3
        >>> TabularGrid(rows=()).is_empty
        True
    """

    rows: tuple[tuple[str, ...], ...] = ()

    def __post_init__(self) -> None:
        """
        Validate grid shape and cell types.

        Raises:
            ValueError: If rows differ in length or a cell is not a string
        """
        if not self.rows:
            return

        expected_width = len(self.rows[0])
        for index, row in enumerate(self.rows):
            if len(row) != expected_width:
                raise ValueError(
                    f"Row {index} has {len(row)} cells, expected {expected_width}"
                )
            for cell in row:
                if not isinstance(cell, str):
                    raise ValueError(
                        f"Row {index} contains non-text cell of type {type(cell).__name__}"
                    )

    @classmethod
    def from_ragged_rows(cls, rows: Iterable[Sequence[str]]) -> "TabularGrid":
        """
        Build a grid from rows of differing length.

        Args:
            rows: Rows of string cells, possibly ragged

        Returns:
            TabularGrid whose width equals the longest input row
        """
        materialized = [tuple(row) for row in rows]
        if not materialized:
            return cls(rows=())

        max_len = max(len(row) for row in materialized)
        padded = tuple(
            row + (PAD_VALUE,) * (max_len - len(row)) for row in materialized
        )
        return cls(rows=padded)

    @property
    def row_count(self) -> int:
        """Number of rows in the grid."""
        return len(self.rows)

    @property
    def width(self) -> int:
        """Number of cells in every row (0 for an empty grid)."""
        return len(self.rows[0]) if self.rows else 0

    @property
    def is_empty(self) -> bool:
        """True if the grid has no rows."""
        return not self.rows

    def to_lists(self) -> list[list[str]]:
        """Return rows as nested lists (for JSON serialization and tests)."""
        return [list(row) for row in self.rows]
