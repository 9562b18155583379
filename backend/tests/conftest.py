"""
NASA Explorer Backend — Test Configuration (conftest.py)
=========================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   No test talks to the real NASA APIs; upstream traffic is answered by
       httpx.MockTransport handlers and the app is driven through ASGITransport.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── app:              fresh FastAPI instance from create_app()
    ├── mock_nasa:        installs a NasaClient backed by a MockTransport handler
    ├── test_client:      HTTPX AsyncClient talking to `app`
    ├── apod_record:      one valid APOD payload
    └── galaxy_payload:   one-item image search payload
"""

import os

# Override settings for testing BEFORE any explorer imports
os.environ["NASA_API_KEY"] = "test-nasa-key"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests
os.environ["RETRY_MIN_WAIT"] = "0"  # Retries without sleeping
os.environ["RETRY_MAX_WAIT"] = "0"

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from explorer.services.nasa_client import NasaClient, get_nasa_client


# ══════════════════════════════════════════════════════════════════════════
# Sample Payloads
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def apod_record():
    """A complete APOD record as api.nasa.gov returns it."""
    return {
        "date": "2024-01-01",
        "title": "The Snows of Churyumov-Gerasimenko",
        "url": "https://apod.nasa.gov/apod/image/2401/snow_960.jpg",
        "hdurl": "https://apod.nasa.gov/apod/image/2401/snow_2000.jpg",
        "media_type": "image",
        "explanation": "Comet dust falls past the camera.",
        "service_version": "v1",
    }


@pytest.fixture
def galaxy_payload():
    """Page 1 of a search for "galaxy" with a single hit."""
    return {
        "collection": {
            "items": [
                {
                    "data": [{"nasa_id": "G1", "title": "Galaxy 1"}],
                    "links": [{"href": "u1"}],
                }
            ],
            "metadata": {"total_hits": 1},
        }
    }


# ══════════════════════════════════════════════════════════════════════════
# Application Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app():
    """
    Provides a fresh application per test.

    Why:  Middleware state (rate limit counters) must not leak between tests.
    """
    from explorer.main import create_app

    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def mock_nasa(app):
    """
    Routes the app's NASA calls to a MockTransport handler.

    Usage:
        def test_x(mock_nasa):
            client = mock_nasa(lambda request: httpx.Response(200, json={...}))

    Returns the installed NasaClient; extra keyword arguments go to its
    constructor (api_key, retry_attempts, ...).
    """

    def install(handler, **kwargs) -> NasaClient:
        client = NasaClient(transport=httpx.MockTransport(handler), **kwargs)
        app.dependency_overrides[get_nasa_client] = lambda: client
        return client

    return install


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    What:    HTTPX AsyncClient configured to talk to our FastAPI app.
    How:     Uses ASGITransport to route requests directly to the app.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
