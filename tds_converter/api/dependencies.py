"""
API Dependencies

FastAPI dependency providers. The artifact store and settings are created
once in the application lifespan and kept on app.state; routers reach
them through these functions, so tests can swap them with
app.dependency_overrides.
"""

from fastapi import Depends, Request

from tds_converter.application.ports.artifact_store import ArtifactStoreProtocol
from tds_converter.application.services.convert_batch_use_case import (
    ConvertBatchUseCase,
)
from tds_converter.application.services.tds_conversion_service import (
    TdsConversionService,
)
from tds_converter.config import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_artifact_store(request: Request) -> ArtifactStoreProtocol:
    return request.app.state.artifact_store


def get_convert_batch_use_case(
    settings: Settings = Depends(get_settings),
    artifact_store: ArtifactStoreProtocol = Depends(get_artifact_store),
) -> ConvertBatchUseCase:
    """
    Dependency injection for ConvertBatchUseCase.

    Returns:
        ConvertBatchUseCase wired to the shared artifact store
    """
    return ConvertBatchUseCase(
        artifact_store=artifact_store,
        conversion_service=TdsConversionService(decode_errors=settings.decode_errors),
        max_workers=settings.max_workers,
    )
