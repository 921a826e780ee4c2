"""
Application Services

Responsibility:
    Orchestration services that coordinate domain services
    and infrastructure components.

Contains:
    - TdsConversionService: parse + encode one file
    - ConvertBatchUseCase: convert and store a batch of uploads

Does NOT contain:
    - Domain business logic (use Domain services)
    - Direct infrastructure calls (use dependency injection)
"""

from tds_converter.application.services.convert_batch_use_case import (
    ConvertBatchUseCase,
)
from tds_converter.application.services.tds_conversion_service import (
    ConvertedWorkbook,
    TdsConversionService,
)

__all__ = ["ConvertBatchUseCase", "ConvertedWorkbook", "TdsConversionService"]
