"""
API Layer - FastAPI Presentation Layer

Responsibility:
    HTTP interface for the application. Handles uploads, downloads and
    cleanup requests. No business logic.

Contains:
    - FastAPI routers (conversions, outputs)
    - Request/Response models (Pydantic)
    - Dependency injection setup
    - Middleware configuration (CORS, logging)

Does NOT contain:
    - Business logic (belongs to Domain layer)
    - Conversion orchestration (belongs to Application layer)
    - Storage operations (belongs to Infrastructure layer)
"""
