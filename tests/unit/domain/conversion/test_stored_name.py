"""
Tests for stored name derivation.

Covers:
- Extension replacement
- Names without extension
- Client-supplied directory parts
"""

import pytest

from tds_converter.domain.conversion.services.stored_name import (
    derive_stored_name,
    safe_basename,
)


@pytest.mark.parametrize(
    "display_name,expected",
    [
        ("report.txt", "report.xlsx"),
        ("report.tds", "report.xlsx"),
        ("README", "README.xlsx"),
        ("archive.tar.gz", "archive.tar.xlsx"),
        ("report.xlsx", "report.xlsx"),
        (".profile", ".xlsx"),
        ("raport zamówień.txt", "raport zamówień.xlsx"),
    ],
)
def test_derive_stored_name(display_name, expected):
    """Test extension handling."""
    assert derive_stored_name(display_name) == expected


@pytest.mark.parametrize(
    "display_name,expected",
    [
        ("../../etc/passwd", "passwd"),
        ("C:\\Users\\me\\data.txt", "data.txt"),
        ("dir/", "converted"),
        ("..", "converted"),
        ("", "converted"),
    ],
)
def test_safe_basename_strips_directories(display_name, expected):
    """Test that path components from the client are dropped."""
    assert safe_basename(display_name) == expected


def test_derive_stored_name_never_contains_separator():
    """Test that derived names are always plain file names."""
    name = derive_stored_name("../secret/report.txt")

    assert name == "report.xlsx"
    assert "/" not in name
