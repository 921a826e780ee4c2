"""
Stored Name Derivation

Maps an uploaded filename to the name its workbook is stored under.

Rules:
    - Drop any directory part sent by the client ("a/b/report.txt" -> "report.txt")
    - Strip the trailing extension (from the last ".") and append ".xlsx"
    - Without a "." simply append ".xlsx"

Examples:
    >>> derive_stored_name("report.txt")
    'report.xlsx'
    >>> derive_stored_name("README")
    'README.xlsx'
    >>> derive_stored_name("archive.tar.gz")
    'archive.tar.xlsx'
"""

from tds_converter.domain.conversion.constants import OUTPUT_EXTENSION

DEFAULT_BASENAME = "converted"


def safe_basename(display_name: str) -> str:
    """
    Return the last path component of a client-supplied filename.

    Both "/" and "\\\\" count as separators because browsers on Windows may
    send full paths. Names that reduce to nothing, "." or ".." fall back to
    DEFAULT_BASENAME.
    """
    basename = display_name.replace("\\", "/").rsplit("/", 1)[-1].strip()
    if basename in ("", ".", ".."):
        return DEFAULT_BASENAME
    return basename


def derive_stored_name(display_name: str) -> str:
    """
    Derive the artifact name for an uploaded file.

    Args:
        display_name: Original filename from the client

    Returns:
        Stored artifact name ending in ".xlsx"
    """
    basename = safe_basename(display_name)
    if "." in basename:
        basename = basename[: basename.rindex(".")]
    return f"{basename}{OUTPUT_EXTENSION}"
