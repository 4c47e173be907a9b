"""API test fixtures — FastAPI test client with the list client overridden.

Invariants:
    - list_client is a fresh AsyncMock per test (see mock_list_client.py)
    - client_requests counts how often routes pulled a list client from context
    - Bootstrap runs per request so every call reaches create_trusted_apps_list
"""

import pytest
from httpx import ASGITransport, AsyncClient

from trustgate.api.dependencies import get_exception_list_client, get_list_bootstrap
from trustgate.main import app
from trustgate.services.list_bootstrap import TrustedAppsListBootstrap

from tests.api.mock_list_client import make_list_client


@pytest.fixture
def list_client():
    return make_list_client()


@pytest.fixture
def client_requests():
    return []


@pytest.fixture
async def client(list_client, client_requests):
    """FastAPI test client whose routes receive the mock list client."""
    def override_list_client():
        client_requests.append(list_client)
        return list_client

    app.dependency_overrides[get_exception_list_client] = override_list_client
    app.dependency_overrides[get_list_bootstrap] = (
        lambda: TrustedAppsListBootstrap("per_request")
    )

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
