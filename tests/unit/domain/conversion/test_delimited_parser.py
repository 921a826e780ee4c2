"""
Tests for DelimitedTextParser Domain Service.

Covers:
- Caret splitting and right-padding of ragged rows
- Trailing newline handling
- Line trimming (CRLF, whitespace, byte-order mark)
- UTF-8 decoding (strict / replace)
- No type coercion
"""

import pytest

from tds_converter.domain.conversion.services.delimited_parser import (
    DelimitedTextParser,
    parse,
)
from tds_converter.domain.shared.exceptions import DecodeError


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def parser():
    """Fixture for default (strict) parser."""
    return DelimitedTextParser()


# ============================================================================
# HAPPY PATH TESTS
# ============================================================================


def test_parse_pads_short_rows(parser):
    """Test that shorter rows are right-padded to the longest row."""
    grid = parser.parse(b"a^b^c\nd^e")

    assert grid.to_lists() == [["a", "b", "c"], ["d", "e", ""]]
    assert grid.width == 3


def test_parse_keeps_trailing_newline_as_empty_row(parser):
    """Test that a final newline produces a row of empty cells."""
    grid = parser.parse(b"a^b^c\nd^e\n")

    assert grid.to_lists() == [["a", "b", "c"], ["d", "e", ""], ["", "", ""]]


def test_parse_empty_input(parser):
    """Test that empty input yields a single empty cell."""
    assert parser.parse(b"").to_lists() == [[""]]


def test_parse_line_without_delimiter(parser):
    """Test that a line without carets becomes a single-cell row."""
    assert parser.parse(b"plain text").to_lists() == [["plain text"]]


def test_parse_empty_fields_between_delimiters(parser):
    """Test that consecutive carets produce empty cells."""
    assert parser.parse(b"a^^c^").to_lists() == [["a", "", "c", ""]]


def test_parse_never_shrinks_rows(parser):
    """Test that width equals the longest raw row even if it comes last."""
    grid = parser.parse(b"x\ny\n1^2^3^4")

    assert grid.width == 4
    assert grid.to_lists()[0] == ["x", "", "", ""]


@pytest.mark.parametrize(
    "data,expected",
    [
        (b"a^b\r\nc^d\r\n", [["a", "b"], ["c", "d"], ["", ""]]),
        (b"  a^b  \n\tc^d\t", [["a", "b"], ["c", "d"]]),
        ("\ufeffa^b".encode("utf-8"), [["a", "b"]]),
    ],
)
def test_parse_trims_line_ends(parser, data, expected):
    """Test that CR, surrounding whitespace and BOM are removed per line."""
    assert parser.parse(data).to_lists() == expected


def test_parse_does_not_trim_inner_cells(parser):
    """Test that whitespace next to an inner delimiter is preserved."""
    assert parser.parse(b"a ^ b").to_lists() == [["a ", " b"]]


def test_parse_keeps_values_as_text(parser):
    """Test that numeric-looking and formula-looking values stay strings."""
    grid = parser.parse(b"007^1e3^=SUM(A1)^TRUE")

    assert grid.to_lists() == [["007", "1e3", "=SUM(A1)", "TRUE"]]


def test_parse_decodes_utf8(parser):
    """Test multi-byte UTF-8 content."""
    grid = parser.parse("Zażółć^gęślą^jaźń".encode("utf-8"))

    assert grid.to_lists() == [["Zażółć", "gęślą", "jaźń"]]


def test_parse_custom_delimiter():
    """Test parser with a non-default delimiter."""
    grid = DelimitedTextParser(delimiter="|").parse(b"a|b^c")

    assert grid.to_lists() == [["a", "b^c"]]


# ============================================================================
# DECODING TESTS
# ============================================================================


def test_parse_invalid_utf8_strict_raises(parser):
    """Test that invalid UTF-8 raises DecodeError with byte position."""
    with pytest.raises(DecodeError) as exc_info:
        parser.parse(b"ok^\xff")

    assert exc_info.value.position == 3


def test_parse_invalid_utf8_replace_mode():
    """Test that replace mode substitutes U+FFFD instead of failing."""
    grid = DelimitedTextParser(decode_errors="replace").parse(b"ok^\xff")

    assert grid.to_lists() == [["ok", "\ufffd"]]


def test_module_level_parse():
    """Test the convenience wrapper."""
    assert parse(b"a^b").to_lists() == [["a", "b"]]


# ============================================================================
# VALIDATION TESTS
# ============================================================================


def test_empty_delimiter_rejected():
    """Test that an empty delimiter is rejected."""
    with pytest.raises(ValueError):
        DelimitedTextParser(delimiter="")


def test_unknown_decode_mode_rejected():
    """Test that unknown decode modes are rejected."""
    with pytest.raises(ValueError):
        DelimitedTextParser(decode_errors="ignore")
