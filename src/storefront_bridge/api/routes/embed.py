"""App URL entry point loaded by the platform admin."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from storefront_bridge.api.deps import SettingsDep
from storefront_bridge.api.pages import render_embedded_page, render_fallback_page
from storefront_bridge.config import Settings
from storefront_bridge.navigation import (
    AppSurfaceRedirect,
    ConsentRedirect,
    EmbeddedRender,
    EmbedRequest,
    NavigationTarget,
    app_surface_url,
    decide_navigation,
    grant_url,
)

logger = structlog.get_logger()

router = APIRouter(tags=["embed"])


def to_response(target: NavigationTarget, settings: Settings) -> Response:
    """Translate a navigation decision into an HTTP response."""
    match target:
        case ConsentRedirect(slug=slug, shop=shop, host=host):
            return RedirectResponse(
                grant_url(settings.admin_url, slug, shop, host), status_code=302
            )
        case AppSurfaceRedirect(slug=slug, handle=handle, host=host):
            return RedirectResponse(
                app_surface_url(settings.admin_url, slug, handle, host),
                status_code=302,
            )
        case EmbeddedRender(shop=shop, host=host):
            return HTMLResponse(
                render_embedded_page(settings.app_name, shop, host)
            )
        case _:
            return HTMLResponse(render_fallback_page(settings.app_name))


@router.get("/app")
async def app_entry(request: Request, settings: SettingsDep) -> Response:
    """Redirect to consent or the hosted app, or render inside the iframe.

    Never fails: requests without enough routing information get the
    fallback page.
    """
    embed_request = EmbedRequest.from_query(request.query_params)
    target = decide_navigation(
        embed_request,
        handle=settings.app_handle,
        platform_domain=settings.platform_domain,
    )
    logger.info(
        "embed_navigation",
        target=type(target).__name__,
        shop=embed_request.shop,
        embedded=embed_request.embedded,
    )
    return to_response(target, settings)
