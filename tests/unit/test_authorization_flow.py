"""Tests for the OAuth callback state machine."""

from unittest.mock import AsyncMock

import pytest
from factories import context_token, make_settings, sign
from httpx import URL

from storefront_bridge.auth.flow import AuthorizationFlow, CallbackState
from storefront_bridge.errors import TokenExchangeError
from storefront_bridge.exchange import TokenExchangeClient
from storefront_bridge.storage.tokens import InMemoryTokenStore

SHOP = "acme.example-platform.com"
HOST = context_token("admin.example-platform.com/store/acme-host")


@pytest.fixture()
def exchange() -> AsyncMock:
    mock = AsyncMock(spec=TokenExchangeClient)
    mock.exchange.return_value = "shpat_test_token"
    return mock


@pytest.fixture()
def store() -> InMemoryTokenStore:
    return InMemoryTokenStore()


@pytest.fixture()
def flow(exchange: AsyncMock, store: InMemoryTokenStore) -> AuthorizationFlow:
    return AuthorizationFlow(make_settings(), exchange, store)


class TestReceived:
    @pytest.mark.parametrize("missing", ["shop", "code", "hmac"])
    async def test_missing_param(
        self, flow: AuthorizationFlow, exchange: AsyncMock, missing: str
    ) -> None:
        """Any missing required param -> 400, no exchange call."""
        params = sign({"shop": SHOP, "code": "abc", "timestamp": "1"})
        del params[missing]

        outcome = await flow.complete(params)

        assert outcome.state == CallbackState.MISSING_PARAMS
        assert outcome.status_code == 400
        assert outcome.redirect_url is None
        assert exchange.exchange.await_count == 0

    async def test_empty_value_counts_as_missing(
        self, flow: AuthorizationFlow, exchange: AsyncMock
    ) -> None:
        outcome = await flow.complete(sign({"shop": SHOP, "code": ""}))
        assert outcome.state == CallbackState.MISSING_PARAMS
        exchange.exchange.assert_not_awaited()


class TestValidated:
    async def test_tampered_hmac(
        self, flow: AuthorizationFlow, exchange: AsyncMock
    ) -> None:
        params = sign({"shop": SHOP, "code": "abc", "timestamp": "1"})
        params["hmac"] = "0" * 64

        outcome = await flow.complete(params)

        assert outcome.state == CallbackState.MAC_INVALID
        assert outcome.status_code == 401
        assert exchange.exchange.await_count == 0

    async def test_host_is_part_of_signature(
        self, flow: AuthorizationFlow, exchange: AsyncMock
    ) -> None:
        """host added after signing invalidates the MAC."""
        params = sign({"shop": SHOP, "code": "abc"})
        params["host"] = HOST

        outcome = await flow.complete(params)

        assert outcome.state == CallbackState.MAC_INVALID
        exchange.exchange.assert_not_awaited()

    async def test_wrong_secret(self, exchange: AsyncMock) -> None:
        flow = AuthorizationFlow(
            make_settings(shopify_api_secret="other"), exchange, InMemoryTokenStore()
        )
        outcome = await flow.complete(sign({"shop": SHOP, "code": "abc"}))
        assert outcome.state == CallbackState.MAC_INVALID

    async def test_unset_secret_rejects(self, exchange: AsyncMock) -> None:
        flow = AuthorizationFlow(
            make_settings(shopify_api_secret=None), exchange, InMemoryTokenStore()
        )
        outcome = await flow.complete(sign({"shop": SHOP, "code": "abc"}, secret=""))
        assert outcome.state == CallbackState.MAC_INVALID


class TestExchanged:
    async def test_no_token(self, flow: AuthorizationFlow, exchange: AsyncMock) -> None:
        exchange.exchange.return_value = None

        outcome = await flow.complete(sign({"shop": SHOP, "code": "abc"}))

        assert outcome.state == CallbackState.EXCHANGE_FAILED
        assert outcome.status_code == 500
        assert outcome.detail == "Failed to obtain access_token"

    async def test_transport_error(
        self, flow: AuthorizationFlow, exchange: AsyncMock, store: InMemoryTokenStore
    ) -> None:
        exchange.exchange.side_effect = TokenExchangeError(SHOP, "ConnectError")

        outcome = await flow.complete(sign({"shop": SHOP, "code": "abc"}))

        assert outcome.state == CallbackState.EXCHANGE_ERROR
        assert outcome.status_code == 500
        assert len(store) == 0

    async def test_exchange_called_once_with_shop_and_code(
        self, flow: AuthorizationFlow, exchange: AsyncMock
    ) -> None:
        await flow.complete(sign({"shop": SHOP, "code": "the-code"}))
        exchange.exchange.assert_awaited_once_with(SHOP, "the-code")


class TestRedirecting:
    async def test_redirects_to_app_surface(
        self, flow: AuthorizationFlow, store: InMemoryTokenStore
    ) -> None:
        outcome = await flow.complete(sign({"shop": SHOP, "code": "abc"}))

        assert outcome.ok
        assert outcome.status_code == 302
        assert outcome.redirect_url == (
            "https://admin.example-platform.com/store/acme/apps/demo"
        )
        stored = store.get("acme")
        assert stored is not None
        assert stored.shop == SHOP
        assert stored.access_token == "shpat_test_token"

    async def test_host_forwarded_and_used_for_slug(
        self, flow: AuthorizationFlow, store: InMemoryTokenStore
    ) -> None:
        outcome = await flow.complete(
            sign({"shop": SHOP, "code": "abc", "host": HOST, "timestamp": "9"})
        )

        assert outcome.redirect_url is not None
        url = URL(outcome.redirect_url)
        assert url.path == "/store/acme-host/apps/demo"
        assert url.params["host"] == HOST
        assert store.get("acme-host") is not None

    async def test_never_redirects_to_grant(self, flow: AuthorizationFlow) -> None:
        outcome = await flow.complete(sign({"shop": SHOP, "code": "abc", "host": HOST}))
        assert outcome.redirect_url is not None
        assert "/app/grant" not in outcome.redirect_url
