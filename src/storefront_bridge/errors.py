"""Domain-specific exceptions for storefront-bridge.

Routine authentication rejections (missing params, bad MAC, no token in
the exchange response) are outcome states, not exceptions.
"""


class TokenExchangeError(Exception):
    """The token-exchange call failed at the transport or protocol level."""

    def __init__(self, shop: str, reason: str) -> None:
        self.shop = shop
        self.reason = reason
        super().__init__(f"Token exchange with {shop} failed: {reason}")


class ConfigurationError(Exception):
    """Raised when process configuration is unusable."""
