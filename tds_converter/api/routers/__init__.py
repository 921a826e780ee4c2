"""
API Routers Package

Contains all FastAPI routers grouped by functionality.

Architecture Notes:
    - Part of API Layer (Presentation)
    - Routers are thin wrappers around Application Layer use cases
    - All routers follow dependency injection pattern

Available Routers:
    - conversions_router: Upload and conversion endpoint
    - outputs_router: Download and cleanup endpoints
"""

from .conversions import router as conversions_router
from .outputs import router as outputs_router

__all__ = ["conversions_router", "outputs_router"]
