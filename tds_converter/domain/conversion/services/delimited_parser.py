"""
DelimitedTextParser Domain Service

Turns raw caret-delimited bytes into a rectangular TabularGrid.

Responsibility:
    - Decode bytes as UTF-8 (strict or replacement mode)
    - Split text into lines and lines into cells
    - Normalise ragged rows by right-padding with empty strings

Parsing Rules:
    1. Split on "\\n". A final newline leaves an empty last line, which is
       kept and becomes a row of empty cells after padding.
    2. Trim each line (whitespace, "\\r" of CRLF files, byte-order mark).
    3. Split each line on "^". No quoting, no escaping.
    4. Pad every row to the width of the longest row.
    5. Never coerce types: "007" stays "007".

Architecture Notes:
    - Domain Service (pure function over bytes, no I/O)
    - Never fails on malformed text; only strict decoding can raise
"""

import logging
from typing import Literal

from tds_converter.domain.conversion.constants import (
    BYTE_ORDER_MARK,
    FIELD_DELIMITER,
    LINE_SEPARATOR,
)
from tds_converter.domain.conversion.value_objects.tabular_grid import TabularGrid
from tds_converter.domain.shared.exceptions import DecodeError

logger = logging.getLogger(__name__)

DecodeErrorsMode = Literal["strict", "replace"]


class DelimitedTextParser:
    """
    Parser for caret-delimited text exports.

    Attributes:
        delimiter: Field separator (default "^")
        decode_errors: "strict" raises DecodeError on invalid UTF-8,
            "replace" substitutes U+FFFD and never fails

    Examples:
        >>> parser = DelimitedTextParser()
        >>> parser.parse(b"a^b^c\\nd^e\\n").to_lists()
        [['a', 'b', 'c'], ['d', 'e', ''], ['', '', '']]
        >>> parser.parse(b"no delimiter").to_lists()
        [['no delimiter']]
    """

    def __init__(
        self,
        delimiter: str = FIELD_DELIMITER,
        decode_errors: DecodeErrorsMode = "strict",
    ) -> None:
        if not delimiter:
            raise ValueError("Delimiter must be a non-empty string")
        if decode_errors not in ("strict", "replace"):
            raise ValueError(
                f"decode_errors must be 'strict' or 'replace', got {decode_errors!r}"
            )
        self.delimiter = delimiter
        self.decode_errors = decode_errors

    def parse(self, data: bytes) -> TabularGrid:
        """
        Parse delimited bytes into a rectangular grid.

        Args:
            data: Raw file content

        Returns:
            TabularGrid with one row per line of input

        Raises:
            DecodeError: If data is not valid UTF-8 and decode_errors="strict"
        """
        text = self.decode(data)
        rows = [self.split_line(line) for line in text.split(LINE_SEPARATOR)]
        grid = TabularGrid.from_ragged_rows(rows)

        logger.debug(f"Parsed {grid.row_count} rows x {grid.width} columns")
        return grid

    def decode(self, data: bytes) -> str:
        """
        Decode bytes as UTF-8 text.

        Args:
            data: Raw file content

        Returns:
            Decoded text

        Raises:
            DecodeError: If decoding fails in strict mode
        """
        try:
            return data.decode("utf-8", errors=self.decode_errors)
        except UnicodeDecodeError as e:
            raise DecodeError("Input is not valid UTF-8 text", position=e.start) from e

    def split_line(self, line: str) -> list[str]:
        """
        Trim a single line and split it into cells.

        Examples:
            >>> DelimitedTextParser().split_line("  a^b^c \\r")
            ['a', 'b', 'c']
            >>> DelimitedTextParser().split_line("")
            ['']
        """
        # Inner cells are not trimmed, only the line ends
        trimmed = line.strip().strip(BYTE_ORDER_MARK).strip()
        return trimmed.split(self.delimiter)


def parse(data: bytes, decode_errors: DecodeErrorsMode = "strict") -> TabularGrid:
    """
    Parse caret-delimited bytes with default settings.

    Convenience wrapper around DelimitedTextParser for one-off use.
    """
    return DelimitedTextParser(decode_errors=decode_errors).parse(data)
