"""OAuth redirect endpoint (the app's allowed redirection URL)."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, RedirectResponse, Response

from storefront_bridge.api.deps import get_authorization_flow
from storefront_bridge.auth.flow import AuthorizationFlow

router = APIRouter(tags=["oauth"])

FlowDep = Annotated[AuthorizationFlow, Depends(get_authorization_flow)]


@router.get("/auth/callback")
async def auth_callback(request: Request, flow: FlowDep) -> Response:
    """Verify the signed callback, exchange the code, go to the app.

    Returns 302 on success; 400 for missing params, 401 for a bad
    HMAC, 500 when the token exchange fails.
    """
    outcome = await flow.complete(request.query_params)
    if outcome.ok and outcome.redirect_url:
        return RedirectResponse(outcome.redirect_url, status_code=302)
    return PlainTextResponse(outcome.detail, status_code=outcome.status_code)
