"""
Tests for TdsConversionService.

Covers the parse + encode pipeline for a single file and injection of
collaborators.
"""

from unittest.mock import Mock

import pytest

from tds_converter.application.services.tds_conversion_service import (
    TdsConversionService,
)
from tds_converter.domain.conversion.value_objects.tabular_grid import TabularGrid
from tds_converter.domain.shared.exceptions import DecodeError


def test_convert_returns_grid_and_workbook(read_sheet):
    """Test end-to-end conversion of one file."""
    service = TdsConversionService()

    result = service.convert(b"id^name\n1^Alice\n2")

    assert result.grid.to_lists() == [["id", "name"], ["1", "Alice"], ["2", ""]]
    assert result.size_bytes == len(result.data)
    _, rows = read_sheet(result.data, 3, 2)
    assert rows == [["id", "name"], ["1", "Alice"], ["2", ""]]


def test_convert_strict_decoding_raises():
    """Test that invalid UTF-8 fails in strict mode."""
    with pytest.raises(DecodeError):
        TdsConversionService().convert(b"\xc3\x28")


def test_convert_replace_decoding():
    """Test that replace mode never fails on bad bytes."""
    result = TdsConversionService(decode_errors="replace").convert(b"a^\xff")

    assert result.grid.to_lists() == [["a", "\ufffd"]]


def test_convert_uses_injected_encoder():
    """Test that the encoder collaborator receives the parsed grid."""
    encoder = Mock()
    encoder.encode.return_value = b"xlsx-bytes"
    service = TdsConversionService(encoder=encoder)

    result = service.convert(b"a^b")

    encoder.encode.assert_called_once_with(TabularGrid(rows=(("a", "b"),)))
    assert result.data == b"xlsx-bytes"
