"""Fixtures for HTTP-level tests against the FastAPI app."""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
from factories import make_settings
from httpx import ASGITransport, AsyncClient

from storefront_bridge.api.app import app
from storefront_bridge.api.deps import (
    get_compliance_handler,
    get_settings,
    get_token_exchange,
    get_token_store,
)
from storefront_bridge.exchange import TokenExchangeClient
from storefront_bridge.storage.tokens import InMemoryTokenStore
from storefront_bridge.webhooks import ComplianceHandler


@pytest.fixture()
def mock_exchange() -> AsyncMock:
    mock = AsyncMock(spec=TokenExchangeClient)
    mock.exchange.return_value = "shpat_test_token"
    return mock


@pytest.fixture()
def token_store() -> InMemoryTokenStore:
    return InMemoryTokenStore()


@pytest.fixture()
def mock_handler() -> AsyncMock:
    return AsyncMock(spec=ComplianceHandler)


@pytest.fixture()
async def client(
    mock_exchange: AsyncMock,
    token_store: InMemoryTokenStore,
    mock_handler: AsyncMock,
) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient with fixture settings and stubbed collaborators."""
    test_settings = make_settings()
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_token_exchange] = lambda: mock_exchange
    app.dependency_overrides[get_token_store] = lambda: token_store
    app.dependency_overrides[get_compliance_handler] = lambda: mock_handler
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
