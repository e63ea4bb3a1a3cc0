"""Tenant slug resolution from the context token or the tenant domain."""

from __future__ import annotations

import base64
import binascii
import re
from urllib.parse import urlsplit

STORE_SEGMENT = "store"

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")


def decode_context_token(token: str | None) -> str | None:
    """Decode the base64 context token (``host`` param) to text.

    Accepts both the standard and URL-safe alphabets, with or without
    padding. Returns None on any decoding failure.
    """
    if not token:
        return None
    normalized = token.strip().replace("-", "+").replace("_", "/")
    normalized += "=" * (-len(normalized) % 4)
    try:
        raw = base64.b64decode(normalized, validate=True)
        return raw.decode("utf-8")
    except (binascii.Error, ValueError):
        return None


def slug_from_context_token(token: str | None) -> str | None:
    """Extract the slug following the ``store`` path segment.

    ``admin.shopify.com/store/acme`` -> ``acme``. Missing scheme is
    tolerated; the token normally carries a bare host and path.
    """
    decoded = decode_context_token(token)
    if not decoded:
        return None
    if not _SCHEME_RE.match(decoded):
        decoded = f"https://{decoded}"
    try:
        path = urlsplit(decoded).path
    except ValueError:
        return None

    segments = [s for s in path.split("/") if s]
    try:
        idx = segments.index(STORE_SEGMENT)
    except ValueError:
        return None
    if idx + 1 >= len(segments):
        return None
    return segments[idx + 1]


def slug_from_tenant_domain(
    tenant_domain: str | None, platform_domain: str
) -> str | None:
    """Strip the platform suffix: ``foo.myshopify.com`` -> ``foo``."""
    if not tenant_domain:
        return None
    slug = tenant_domain.strip().removesuffix(f".{platform_domain}")
    return slug or None


def resolve_slug(
    tenant_domain: str | None,
    context_token: str | None,
    platform_domain: str,
) -> str | None:
    """Resolve the tenant slug for building platform URLs.

    The context token takes precedence; the tenant domain is the
    fallback. None means there is not enough information to navigate.
    """
    return slug_from_context_token(context_token) or slug_from_tenant_domain(
        tenant_domain, platform_domain
    )
