"""Persistence seams."""

from storefront_bridge.storage.tokens import InMemoryTokenStore, StoredToken, TokenStore

__all__ = ["InMemoryTokenStore", "StoredToken", "TokenStore"]
