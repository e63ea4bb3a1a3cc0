"""Access token persistence seam.

The app only needs a ``save`` capability; the storage schema belongs
to the deployment. The in-memory store is the default.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from datetime import UTC, datetime

import structlog

logger = structlog.get_logger()


@dataclass(frozen=True)
class StoredToken:
    shop: str
    access_token: str
    issued_at: datetime


class TokenStore(abc.ABC):
    """Receives access tokens issued during installation."""

    @abc.abstractmethod
    async def save(self, tenant_slug: str, shop: str, access_token: str) -> None:
        """Persist the token for a tenant, replacing any previous one."""
        ...


class InMemoryTokenStore(TokenStore):
    """Process-local token store.

    Single-instance only; tokens are lost on restart.
    """

    def __init__(self) -> None:
        self._tokens: dict[str, StoredToken] = {}

    async def save(self, tenant_slug: str, shop: str, access_token: str) -> None:
        self._tokens[tenant_slug] = StoredToken(
            shop=shop,
            access_token=access_token,
            issued_at=datetime.now(UTC),
        )
        logger.info("access_token_stored", tenant_slug=tenant_slug, shop=shop)

    def get(self, tenant_slug: str) -> StoredToken | None:
        return self._tokens.get(tenant_slug)

    def __len__(self) -> int:
        return len(self._tokens)
