"""Mandatory compliance webhooks (GDPR/CCPA).

Each notification is authenticated with the raw-body MAC before any
handler runs; an unauthenticated notification is never acknowledged.
"""

from __future__ import annotations

import abc
import json
from enum import StrEnum
from typing import Any

import structlog

from storefront_bridge.auth.mac import MacVerificationResult, verify_body_mac

logger = structlog.get_logger()

WEBHOOK_HMAC_HEADER = "X-Shopify-Hmac-Sha256"
WEBHOOK_SHOP_HEADER = "X-Shopify-Shop-Domain"


class ComplianceTopic(StrEnum):
    CUSTOMERS_DATA_REQUEST = "customers/data_request"
    CUSTOMERS_REDACT = "customers/redact"
    SHOP_REDACT = "shop/redact"


def authenticate_webhook(
    raw_body: bytes, header_value: str | None, secret: str
) -> MacVerificationResult:
    """Check the vendor MAC header against the exact request bytes."""
    return verify_body_mac(raw_body, header_value, secret)


def parse_payload(raw_body: bytes) -> dict[str, Any]:
    """Best-effort JSON decode of an already authenticated body.

    Returns an empty dict for non-JSON or non-object payloads.
    """
    try:
        payload = json.loads(raw_body)
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


class ComplianceHandler(abc.ABC):
    """Acts on an authenticated compliance notification."""

    @abc.abstractmethod
    async def handle(
        self,
        topic: ComplianceTopic,
        shop_domain: str | None,
        payload: dict[str, Any],
    ) -> None: ...


class AcknowledgeOnlyHandler(ComplianceHandler):
    """Default handler: the app stores no customer data, so only log."""

    async def handle(
        self,
        topic: ComplianceTopic,
        shop_domain: str | None,
        payload: dict[str, Any],
    ) -> None:
        logger.info(
            "webhook_received",
            topic=str(topic),
            shop=shop_domain,
            payload_keys=sorted(payload),
        )
