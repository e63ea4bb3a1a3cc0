"""OAuth callback handling: validate, exchange, redirect.

Single pass per request:

    Received -> Validated -> Exchanged -> Redirecting

with terminal rejections MISSING_PARAMS (400), MAC_INVALID (401),
EXCHANGE_FAILED and EXCHANGE_ERROR (500). The exchange collaborator is
called at most once and only after the MAC check passed; nothing is
retried here, the platform restarts the flow on reload.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum

import structlog

from storefront_bridge.auth.mac import verify_query_mac
from storefront_bridge.config import Settings
from storefront_bridge.errors import TokenExchangeError
from storefront_bridge.exchange import TokenExchangeClient
from storefront_bridge.navigation import app_surface_url
from storefront_bridge.storage.tokens import TokenStore
from storefront_bridge.tenancy import resolve_slug

logger = structlog.get_logger()

REQUIRED_PARAMS: tuple[str, ...] = ("shop", "code", "hmac")


class CallbackState(StrEnum):
    REDIRECTING = "redirecting"
    MISSING_PARAMS = "missing_params"
    MAC_INVALID = "mac_invalid"
    EXCHANGE_FAILED = "exchange_failed"
    EXCHANGE_ERROR = "exchange_error"


_STATUS_CODES: dict[CallbackState, int] = {
    CallbackState.REDIRECTING: 302,
    CallbackState.MISSING_PARAMS: 400,
    CallbackState.MAC_INVALID: 401,
    CallbackState.EXCHANGE_FAILED: 500,
    CallbackState.EXCHANGE_ERROR: 500,
}


@dataclass(frozen=True)
class CallbackOutcome:
    """Terminal state of one callback request."""

    state: CallbackState
    detail: str = ""
    redirect_url: str | None = None

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self.state]

    @property
    def ok(self) -> bool:
        return self.state == CallbackState.REDIRECTING


class AuthorizationFlow:
    """Complete the platform's OAuth authorization-code callback.

    Holds no per-request state; one instance may serve many requests.
    """

    def __init__(
        self,
        settings: Settings,
        exchange: TokenExchangeClient,
        token_store: TokenStore,
    ) -> None:
        self._settings = settings
        self._exchange = exchange
        self._token_store = token_store

    async def complete(self, params: Mapping[str, str]) -> CallbackOutcome:
        """Run the callback state machine over the request query.

        Args:
            params: All query parameters as received. ``host`` is an
                ordinary signed parameter and stays in the MAC message.

        Returns:
            CallbackOutcome; ``redirect_url`` is set only on success.
        """
        missing = [name for name in REQUIRED_PARAMS if not params.get(name)]
        if missing:
            logger.info(
                "oauth_callback_rejected", reason="missing_params", missing=missing
            )
            return CallbackOutcome(
                state=CallbackState.MISSING_PARAMS,
                detail="Missing required OAuth params",
            )

        shop = params["shop"]
        code = params["code"]
        host = params.get("host") or None
        log = logger.bind(shop=shop)

        if not verify_query_mac(params, self._settings.mac_secret):
            log.warning("oauth_callback_rejected", reason="mac_invalid")
            return CallbackOutcome(
                state=CallbackState.MAC_INVALID, detail="HMAC invalid"
            )

        try:
            access_token = await self._exchange.exchange(shop, code)
        except TokenExchangeError as e:
            log.error("token_exchange_error", reason=e.reason)
            return CallbackOutcome(
                state=CallbackState.EXCHANGE_ERROR, detail="OAuth error"
            )

        if not access_token:
            log.error("token_exchange_failed")
            return CallbackOutcome(
                state=CallbackState.EXCHANGE_FAILED,
                detail="Failed to obtain access_token",
            )

        # shop is present, so the domain fallback always yields a slug
        slug = resolve_slug(shop, host, self._settings.platform_domain) or shop
        await self._token_store.save(slug, shop, access_token)

        target = app_surface_url(
            self._settings.admin_url, slug, self._settings.app_handle, host
        )
        log.info("oauth_completed", tenant_slug=slug)
        return CallbackOutcome(state=CallbackState.REDIRECTING, redirect_url=target)
