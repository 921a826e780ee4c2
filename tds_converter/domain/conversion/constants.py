"""
Conversion Domain Constants

Fixed values of the delimited-text to workbook conversion.

Note: The delimiter is not auto-detected. Files using another separator
parse into single-cell rows.
"""

from typing import Final


# ============================================================================
# DELIMITED TEXT FORMAT
# ============================================================================

# Field separator used by TDS exports (no quoting, no escaping)
FIELD_DELIMITER: Final[str] = "^"

# Line separator; "\r" of CRLF files is removed by per-line trimming
LINE_SEPARATOR: Final[str] = "\n"

# Value used to right-pad ragged rows
PAD_VALUE: Final[str] = ""

# Characters trimmed from both ends of every line (str.strip() default set
# plus the byte-order mark left at the start of some exports)
BYTE_ORDER_MARK: Final[str] = "\ufeff"


# ============================================================================
# WORKBOOK OUTPUT
# ============================================================================

SHEET_NAME: Final[str] = "Sheet1"

OUTPUT_EXTENSION: Final[str] = ".xlsx"

XLSX_MEDIA_TYPE: Final[str] = (
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
)

ZIP_MEDIA_TYPE: Final[str] = "application/zip"

# Bulk download file name: converted-files-<timestamp>.zip
ARCHIVE_NAME_PREFIX: Final[str] = "converted-files-"
