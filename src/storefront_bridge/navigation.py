"""Navigation decision for the embedded app entry point.

The platform loads ``/app`` both at top level and inside its admin
iframe, with and without a signed query. The decision is an ordered
rule list, first match wins:

1. slug + shop + host + hmac        -> ConsentRedirect
2. slug + shop + host, not embedded -> ConsentRedirect
3. embedded == "1"                  -> EmbeddedRender
4. slug + shop                      -> AppSurfaceRedirect
5. otherwise                        -> FallbackRender

Rules 1-2 must precede rule 4: a signed or top-level request first has
to establish the platform session through the grant screen. Rule 3 must
never redirect, since navigation inside the iframe is rejected.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from urllib.parse import urlencode

from storefront_bridge.tenancy import resolve_slug

EMBEDDED_FLAG = "1"


@dataclass(frozen=True)
class EmbedRequest:
    """Query parameters relevant to the navigation decision."""

    shop: str | None = None
    host: str | None = None
    hmac: str | None = None
    embedded: str | None = None

    @classmethod
    def from_query(cls, params: Mapping[str, str]) -> EmbedRequest:
        """Build from a query mapping; empty values count as absent."""
        return cls(
            shop=params.get("shop") or None,
            host=params.get("host") or None,
            hmac=params.get("hmac") or None,
            embedded=params.get("embedded") or None,
        )


@dataclass(frozen=True)
class ConsentRedirect:
    slug: str
    shop: str
    host: str


@dataclass(frozen=True)
class AppSurfaceRedirect:
    slug: str
    handle: str
    host: str | None = None


@dataclass(frozen=True)
class EmbeddedRender:
    shop: str | None = None
    host: str | None = None


@dataclass(frozen=True)
class FallbackRender:
    pass


NavigationTarget = (
    ConsentRedirect | AppSurfaceRedirect | EmbeddedRender | FallbackRender
)


def decide_navigation(
    request: EmbedRequest,
    *,
    handle: str,
    platform_domain: str,
) -> NavigationTarget:
    """Pick the next navigation target for an ``/app`` request.

    Args:
        request: Parsed query parameters.
        handle: Application handle used in the hosted app surface URL.
        platform_domain: Tenant domain suffix, e.g. ``myshopify.com``.

    Returns:
        One of the four NavigationTarget variants.
    """
    slug = resolve_slug(request.shop, request.host, platform_domain)
    is_embedded = request.embedded == EMBEDDED_FLAG

    if slug and request.shop and request.host and request.hmac:
        return ConsentRedirect(slug=slug, shop=request.shop, host=request.host)

    if slug and request.shop and request.host and not is_embedded:
        return ConsentRedirect(slug=slug, shop=request.shop, host=request.host)

    if is_embedded:
        return EmbeddedRender(shop=request.shop, host=request.host)

    if slug and request.shop:
        return AppSurfaceRedirect(slug=slug, handle=handle, host=request.host)

    return FallbackRender()


def grant_url(admin_url: str, slug: str, shop: str, host: str | None) -> str:
    """Build the platform consent (grant) URL for a tenant."""
    query: dict[str, str] = {"shop": shop}
    if host:
        query["host"] = host
    return f"{admin_url}/store/{slug}/app/grant?{urlencode(query)}"


def app_surface_url(
    admin_url: str, slug: str, handle: str, host: str | None
) -> str:
    """Build the hosted app surface URL, forwarding ``host`` if known."""
    url = f"{admin_url}/store/{slug}/apps/{handle}"
    if host:
        url += f"?{urlencode({'host': host})}"
    return url
