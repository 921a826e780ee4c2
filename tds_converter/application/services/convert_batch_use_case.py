"""
Convert Batch Use Case - Application Orchestration

Responsibility:
    Converts every file of one upload and stores the resulting workbooks.
    Implements Use Case pattern from Clean Architecture.

Architecture Notes:
    - Part of Application Layer (Services/Use Cases)
    - Depends on TdsConversionService (parse + encode)
    - Depends on ArtifactStoreProtocol (injected)
    - Called by API Layer (conversions.py router)

Contains:
    - ConvertBatchUseCase: Main orchestration class

Does NOT contain:
    - HTTP handling or size limits (API Layer)
    - Parsing rules (Domain Layer)
    - File system access (Infrastructure Layer)

Failure Policy:
    Each file is independent. A DecodeError, EncodeError, StoreWriteError or
    any unexpected exception becomes a ConversionFailure for that file only;
    sibling files are still converted. Nothing is stored for a failed file.
"""

import asyncio
import logging
from typing import Optional, Sequence

from tds_converter.application.ports.artifact_store import ArtifactStoreProtocol
from tds_converter.application.services.tds_conversion_service import (
    TdsConversionService,
)
from tds_converter.domain.conversion.services.stored_name import derive_stored_name
from tds_converter.domain.conversion.value_objects.conversion_outcome import (
    ConversionFailure,
    ConversionOutcome,
    ConversionSuccess,
)
from tds_converter.domain.conversion.value_objects.raw_input import RawInput
from tds_converter.domain.shared.exceptions import (
    DecodeError,
    EmptyUploadError,
    EncodeError,
    StoreWriteError,
)

# Configure logger for this module
logger = logging.getLogger(__name__)

# Short reasons shown to the user (details go to the log)
REASON_DECODE = "File is not valid UTF-8 text"
REASON_ENCODE = "Conversion failed"
REASON_STORE = "Converted file could not be saved"
REASON_UNEXPECTED = "Conversion failed"


class ConvertBatchUseCase:
    """
    Use case for converting a batch of uploaded files.

    Process Flow (per file, files run in parallel worker threads):
        1. Derive stored name ("report.txt" -> "report.xlsx")
        2. Parse and encode (TdsConversionService.convert)
        3. Store workbook (ArtifactStoreProtocol.put)
        4. Emit ConversionSuccess, or ConversionFailure on any error

    The result list has one outcome per input at the same position.

    Examples:
        >>> use_case = ConvertBatchUseCase(artifact_store=InMemoryArtifactStore())
        >>> outcomes = await use_case.execute([
        ...     RawInput("a.tds", b"x^y"),
        ...     RawInput("b.tds", b"\\xff"),
        ... ])
        >>> [o.status for o in outcomes]
        ['success', 'error']
    """

    def __init__(
        self,
        artifact_store: ArtifactStoreProtocol,
        conversion_service: Optional[TdsConversionService] = None,
        max_workers: int = 4,
    ) -> None:
        """
        Initialize use case with injected dependencies.

        Args:
            artifact_store: Store receiving converted workbooks
            conversion_service: Parser + encoder (default settings if None)
            max_workers: Maximum files converted concurrently
        """
        if max_workers <= 0:
            raise ValueError(f"max_workers must be positive, got {max_workers}")
        self.artifact_store = artifact_store
        self.conversion_service = conversion_service or TdsConversionService()
        self.max_workers = max_workers

    async def execute(self, inputs: Sequence[RawInput]) -> list[ConversionOutcome]:
        """
        Convert and store every input.

        Args:
            inputs: Uploaded files in request order

        Returns:
            Outcomes in the same order as inputs

        Raises:
            EmptyUploadError: If inputs is empty
        """
        if not inputs:
            raise EmptyUploadError("No files uploaded")

        logger.info(f"Converting batch of {len(inputs)} files")

        semaphore = asyncio.Semaphore(self.max_workers)

        async def run(raw_input: RawInput) -> ConversionOutcome:
            async with semaphore:
                return await asyncio.to_thread(self.convert_one, raw_input)

        outcomes = list(await asyncio.gather(*(run(item) for item in inputs)))

        succeeded = sum(1 for outcome in outcomes if outcome.succeeded)
        logger.info(
            f"Batch finished: {succeeded} converted, {len(outcomes) - succeeded} failed"
        )
        return outcomes

    def convert_one(self, raw_input: RawInput) -> ConversionOutcome:
        """
        Convert and store a single input; never raises.

        Args:
            raw_input: Uploaded file

        Returns:
            ConversionSuccess or ConversionFailure
        """
        display_name = raw_input.display_name
        stored_name = derive_stored_name(display_name)

        try:
            converted = self.conversion_service.convert(raw_input.data)
            self.artifact_store.put(stored_name, converted.data)
        except DecodeError as e:
            logger.warning(f"Error processing file {display_name}: {e}")
            return ConversionFailure(display_name=display_name, reason=REASON_DECODE)
        except EncodeError as e:
            logger.error(f"Error processing file {display_name}: {e}")
            return ConversionFailure(display_name=display_name, reason=REASON_ENCODE)
        except StoreWriteError as e:
            logger.error(f"Error storing file {display_name}: {e}")
            return ConversionFailure(display_name=display_name, reason=REASON_STORE)
        except Exception as e:
            logger.error(
                f"Unexpected error processing file {display_name}: {e}", exc_info=True
            )
            return ConversionFailure(display_name=display_name, reason=REASON_UNEXPECTED)

        logger.info(
            f"Converted {display_name} -> {stored_name} "
            f"({converted.grid.row_count} rows, {converted.size_bytes} bytes)"
        )
        return ConversionSuccess(
            display_name=display_name,
            stored_name=stored_name,
            size_bytes=converted.size_bytes,
            rows=converted.grid.row_count,
            columns=converted.grid.width,
        )
