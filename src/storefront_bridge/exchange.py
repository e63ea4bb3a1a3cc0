"""OAuth authorization-code exchange with the platform token endpoint."""

from __future__ import annotations

import abc
import re
from types import TracebackType

import httpx
import structlog

from storefront_bridge.errors import TokenExchangeError

logger = structlog.get_logger()

TOKEN_PATH = "/admin/oauth/access_token"


class TokenExchangeClient(abc.ABC):
    """Exchange an authorization code for an access token.

    Implementations return None when the platform answered successfully
    but without a token, and raise TokenExchangeError on transport or
    protocol failures. They never retry.
    """

    @abc.abstractmethod
    async def exchange(self, shop: str, code: str) -> str | None:
        """Return the access token for ``code`` issued to ``shop``."""
        ...


class ShopifyTokenExchange(TokenExchangeClient):
    """httpx-based client for ``https://<shop>/admin/oauth/access_token``.

    Usage::

        async with ShopifyTokenExchange(key, secret, "myshopify.com") as ex:
            token = await ex.exchange("acme.myshopify.com", code)
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        platform_domain: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._shop_host_re = re.compile(
            rf"[a-z0-9][a-z0-9-]*\.{re.escape(platform_domain.lower())}"
        )
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def open(self) -> None:
        """Create the underlying httpx client (idempotent)."""
        if self._client is not None:
            return
        self._client = httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
            headers={"Content-Type": "application/json"},
        )

    async def close(self) -> None:
        """Close the underlying httpx client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> ShopifyTokenExchange:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    def _is_platform_host(self, shop: str) -> bool:
        return self._shop_host_re.fullmatch(shop) is not None

    async def exchange(self, shop: str, code: str) -> str | None:
        if self._client is None:
            msg = "ShopifyTokenExchange not initialized. Use 'async with ...'"
            raise RuntimeError(msg)

        # shop is MAC-authenticated, but never post credentials off-platform
        if not self._is_platform_host(shop):
            raise TokenExchangeError(shop, "shop is not a platform domain")

        url = f"https://{shop}{TOKEN_PATH}"
        try:
            response = await self._client.post(
                url,
                json={
                    "client_id": self._client_id,
                    "client_secret": self._client_secret,
                    "code": code,
                },
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise TokenExchangeError(
                shop, f"HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise TokenExchangeError(shop, type(e).__name__) from e
        except ValueError as e:
            raise TokenExchangeError(shop, "response is not JSON") from e

        if not isinstance(payload, dict):
            return None
        token = payload.get("access_token")
        return str(token) if token else None
