"""
Tests for ConvertBatchUseCase.

Tests cover:
- Order preservation and per-file failure isolation
- Mapping of each error type to a failure outcome
- Storage of successful conversions only
- Bounded parallelism
"""

import threading
import time
from unittest.mock import Mock

import pytest

from tds_converter.application.services.convert_batch_use_case import (
    REASON_DECODE,
    REASON_ENCODE,
    REASON_STORE,
    REASON_UNEXPECTED,
    ConvertBatchUseCase,
)
from tds_converter.application.services.tds_conversion_service import (
    ConvertedWorkbook,
    TdsConversionService,
)
from tds_converter.domain.conversion.value_objects.conversion_outcome import (
    ConversionFailure,
    ConversionSuccess,
)
from tds_converter.domain.conversion.value_objects.raw_input import RawInput
from tds_converter.domain.conversion.value_objects.tabular_grid import TabularGrid
from tds_converter.domain.shared.exceptions import (
    EmptyUploadError,
    EncodeError,
    StoreWriteError,
)


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def use_case(memory_store):
    """Use case with real conversion service and in-memory store."""
    return ConvertBatchUseCase(artifact_store=memory_store, max_workers=2)


# ============================================================================
# HAPPY PATH TESTS
# ============================================================================


@pytest.mark.asyncio
async def test_execute_preserves_order_and_isolates_failures(use_case, memory_store):
    """Test [A, B, C] with B failing -> [Success, Failure, Success]."""
    inputs = [
        RawInput("a.txt", b"1^2"),
        RawInput("b.txt", b"\xff\xfe broken"),
        RawInput("c.txt", b"x^y^z\nw"),
    ]

    outcomes = await use_case.execute(inputs)

    assert [type(outcome) for outcome in outcomes] == [
        ConversionSuccess,
        ConversionFailure,
        ConversionSuccess,
    ]
    assert [outcome.display_name for outcome in outcomes] == ["a.txt", "b.txt", "c.txt"]
    assert outcomes[1].reason == REASON_DECODE
    assert memory_store.list() == {"a.xlsx", "c.xlsx"}


@pytest.mark.asyncio
async def test_execute_reports_workbook_details(use_case, memory_store):
    """Test success outcome fields."""
    outcomes = await use_case.execute([RawInput("orders.tds", b"a^b^c\nd^e\n")])

    success = outcomes[0]
    assert success.status == "success"
    assert success.stored_name == "orders.xlsx"
    assert success.rows == 3
    assert success.columns == 3
    assert success.size_bytes == len(memory_store.get_once("orders.xlsx"))


@pytest.mark.asyncio
async def test_execute_duplicate_names_last_write_wins(use_case, memory_store):
    """Test that two uploads with the same stem both report success."""
    outcomes = await use_case.execute(
        [RawInput("data.txt", b"first"), RawInput("data.csv", b"second")]
    )

    assert all(outcome.succeeded for outcome in outcomes)
    assert memory_store.list() == {"data.xlsx"}


@pytest.mark.asyncio
async def test_execute_empty_batch_raises(use_case):
    """Test that an empty batch is rejected."""
    with pytest.raises(EmptyUploadError):
        await use_case.execute([])


# ============================================================================
# ERROR MAPPING TESTS
# ============================================================================


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error,reason",
    [
        (EncodeError("Cannot build workbook"), REASON_ENCODE),
        (RuntimeError("boom"), REASON_UNEXPECTED),
    ],
)
async def test_execute_maps_conversion_errors(memory_store, error, reason):
    """Test that conversion errors become failures and store nothing."""
    service = Mock(spec=TdsConversionService)
    service.convert.side_effect = error
    use_case = ConvertBatchUseCase(artifact_store=memory_store, conversion_service=service)

    outcomes = await use_case.execute([RawInput("a.txt", b"a")])

    assert outcomes == [ConversionFailure("a.txt", reason)]
    assert memory_store.list() == set()


@pytest.mark.asyncio
async def test_execute_maps_store_errors():
    """Test that a failing put becomes a failure for that file only."""
    store = Mock()
    store.put.side_effect = [StoreWriteError("Disk full", name="a.xlsx"), None]
    use_case = ConvertBatchUseCase(artifact_store=store, max_workers=1)

    outcomes = await use_case.execute([RawInput("a.txt", b"a"), RawInput("b.txt", b"b")])

    assert outcomes[0] == ConversionFailure("a.txt", REASON_STORE)
    assert outcomes[1].succeeded


# ============================================================================
# CONCURRENCY TESTS
# ============================================================================


@pytest.mark.asyncio
async def test_execute_bounds_parallelism(memory_store):
    """Test that no more than max_workers files convert at once."""
    active = 0
    peak = 0
    lock = threading.Lock()

    def slow_convert(data):
        nonlocal active, peak
        with lock:
            active += 1
            peak = max(peak, active)
        time.sleep(0.05)
        with lock:
            active -= 1
        return ConvertedWorkbook(grid=TabularGrid.from_ragged_rows([["x"]]), data=b"x")

    service = Mock(spec=TdsConversionService)
    service.convert.side_effect = slow_convert
    use_case = ConvertBatchUseCase(
        artifact_store=memory_store, conversion_service=service, max_workers=2
    )

    outcomes = await use_case.execute(
        [RawInput(f"f{index}.txt", b"x") for index in range(6)]
    )

    assert len(outcomes) == 6
    assert 1 <= peak <= 2


def test_invalid_max_workers_rejected(memory_store):
    """Test constructor validation."""
    with pytest.raises(ValueError):
        ConvertBatchUseCase(artifact_store=memory_store, max_workers=0)
