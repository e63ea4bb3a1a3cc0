"""FastAPI dependency injection."""

from __future__ import annotations

from typing import Annotated, cast

from fastapi import Depends, Request

from storefront_bridge.auth.flow import AuthorizationFlow
from storefront_bridge.config import Settings, get_settings
from storefront_bridge.exchange import TokenExchangeClient
from storefront_bridge.storage.tokens import TokenStore
from storefront_bridge.webhooks import AcknowledgeOnlyHandler, ComplianceHandler

__all__ = [
    "SettingsDep",
    "get_authorization_flow",
    "get_compliance_handler",
    "get_settings",
    "get_token_exchange",
    "get_token_store",
]

SettingsDep = Annotated[Settings, Depends(get_settings)]


async def get_token_exchange(request: Request) -> TokenExchangeClient:
    """Retrieve the token exchange client from app state.

    Initialized during lifespan startup.
    """
    return cast(TokenExchangeClient, request.app.state.token_exchange)


async def get_token_store(request: Request) -> TokenStore:
    """Retrieve the token store from app state.

    Initialized during lifespan startup.
    """
    return cast(TokenStore, request.app.state.token_store)


async def get_compliance_handler(request: Request) -> ComplianceHandler:
    """Compliance handler from app state, acknowledge-only if unset."""
    handler = getattr(request.app.state, "compliance_handler", None)
    if handler is None:
        return AcknowledgeOnlyHandler()
    return cast(ComplianceHandler, handler)


async def get_authorization_flow(
    settings: SettingsDep,
    exchange: Annotated[TokenExchangeClient, Depends(get_token_exchange)],
    token_store: Annotated[TokenStore, Depends(get_token_store)],
) -> AuthorizationFlow:
    """Per-request flow controller wired with configured collaborators."""
    return AuthorizationFlow(settings, exchange, token_store)
