"""Compliance webhook endpoints."""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, Response

from storefront_bridge.api.deps import SettingsDep, get_compliance_handler
from storefront_bridge.webhooks import (
    WEBHOOK_HMAC_HEADER,
    WEBHOOK_SHOP_HEADER,
    ComplianceHandler,
    ComplianceTopic,
    authenticate_webhook,
    parse_payload,
)

logger = structlog.get_logger()

router = APIRouter(prefix="/webhooks", tags=["webhooks"])

HandlerDep = Annotated[ComplianceHandler, Depends(get_compliance_handler)]


async def _receive(
    topic: ComplianceTopic,
    request: Request,
    settings: SettingsDep,
    handler: ComplianceHandler,
) -> Response:
    # Raw bytes, read before any parsing; the platform does not
    # guarantee a JSON content type.
    raw_body = await request.body()
    result = authenticate_webhook(
        raw_body,
        request.headers.get(WEBHOOK_HMAC_HEADER),
        settings.mac_secret,
    )
    if not result:
        logger.warning("webhook_rejected", topic=str(topic))
        return PlainTextResponse("Invalid webhook HMAC", status_code=401)

    await handler.handle(
        topic,
        request.headers.get(WEBHOOK_SHOP_HEADER),
        parse_payload(raw_body),
    )
    return Response(status_code=200)


@router.post("/customers/data_request")
async def customers_data_request(
    request: Request, settings: SettingsDep, handler: HandlerDep
) -> Response:
    """Customer asked for their stored data."""
    return await _receive(
        ComplianceTopic.CUSTOMERS_DATA_REQUEST, request, settings, handler
    )


@router.post("/customers/redact")
async def customers_redact(
    request: Request, settings: SettingsDep, handler: HandlerDep
) -> Response:
    """Erase a customer's data."""
    return await _receive(ComplianceTopic.CUSTOMERS_REDACT, request, settings, handler)


@router.post("/shop/redact")
async def shop_redact(
    request: Request, settings: SettingsDep, handler: HandlerDep
) -> Response:
    """Erase all data for a shop, sent after uninstall."""
    return await _receive(ComplianceTopic.SHOP_REDACT, request, settings, handler)
