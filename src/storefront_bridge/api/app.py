"""FastAPI application with lifespan management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from storefront_bridge.api.deps import SettingsDep
from storefront_bridge.api.middleware import (
    EmbedFramingMiddleware,
    RequestLoggingMiddleware,
)
from storefront_bridge.api.routes.embed import router as embed_router
from storefront_bridge.api.routes.oauth import router as oauth_router
from storefront_bridge.api.routes.webhooks import router as webhooks_router
from storefront_bridge.config import get_settings
from storefront_bridge.errors import ConfigurationError
from storefront_bridge.exchange import ShopifyTokenExchange
from storefront_bridge.logging_config import configure_logging
from storefront_bridge.storage.tokens import InMemoryTokenStore
from storefront_bridge.webhooks import AcknowledgeOnlyHandler

logger = structlog.get_logger()

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown.

    Startup:
        - Check the MAC secret (required in production).
        - Open the token exchange HTTP client.
        - Create the token store and compliance handler.
    Shutdown:
        - Close the HTTP client.
    """
    configure_logging(
        environment=str(settings.environment),
        log_level=settings.log_level,
    )
    if not settings.mac_secret:
        if settings.is_prod:
            msg = "SHOPIFY_API_SECRET must be set in production"
            raise ConfigurationError(msg)
        logger.warning("mac_secret_missing", effect="all HMAC checks will fail")

    app.state.token_store = InMemoryTokenStore()
    app.state.compliance_handler = AcknowledgeOnlyHandler()

    exchange = ShopifyTokenExchange(
        client_id=settings.shopify_api_key,
        client_secret=settings.mac_secret,
        platform_domain=settings.platform_domain,
        timeout=settings.token_exchange_timeout_seconds,
    )
    async with exchange:
        app.state.token_exchange = exchange

        logger.info(
            "app_started",
            environment=str(settings.environment),
            handle=settings.app_handle,
        )
        yield

    logger.info("app_stopped")


app = FastAPI(
    title="Storefront Bridge",
    description="OAuth install, embedded navigation and compliance webhooks",
    version="0.1.0",
    lifespan=lifespan,
    debug=settings.is_dev,
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(EmbedFramingMiddleware, frame_ancestors=settings.frame_ancestors)


@app.get("/", response_class=PlainTextResponse)
async def liveness(current: SettingsDep) -> str:
    """Plain-text liveness marker."""
    return f"{current.app_name} OAuth backend is running"


@app.exception_handler(Exception)
async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Catch-all handler for unhandled exceptions."""
    logger.error("unhandled_exception", exc_info=exc, path=request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


app.include_router(embed_router)
app.include_router(oauth_router)
app.include_router(webhooks_router)
