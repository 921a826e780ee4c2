"""
Common fixtures for API unit tests.

Provides shared test utilities:
- FastAPI app wired to an in-memory artifact store
- TestClient running the app lifespan
- Sample TDS payloads
"""

import pytest
from fastapi.testclient import TestClient

from tds_converter.api.main import create_app


@pytest.fixture
def app(settings, memory_store):
    """FastAPI app using test settings and the shared in-memory store."""
    return create_app(settings=settings, artifact_store=memory_store)


@pytest.fixture
def client(app):
    """
    FastAPI TestClient for testing endpoints.

    Used as a context manager so startup/shutdown (store lifecycle) run.
    """
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_tds():
    """Small caret-delimited payload (3 columns, ragged second row)."""
    return b"id^name^city\n1^Alice\n2^Bob^Krakow"
