"""Request authentication and the OAuth callback flow.

Note: ``AuthorizationFlow`` lives in ``auth.flow`` and is NOT re-exported
here, since it pulls in the exchange client and settings.
Import directly: ``from storefront_bridge.auth.flow import AuthorizationFlow``.
"""

from storefront_bridge.auth.mac import (
    MacScheme,
    MacVerificationResult,
    compute_body_mac,
    compute_query_mac,
    verify_body_mac,
    verify_query_mac,
)

__all__ = [
    "MacScheme",
    "MacVerificationResult",
    "compute_body_mac",
    "compute_query_mac",
    "verify_body_mac",
    "verify_query_mac",
]
