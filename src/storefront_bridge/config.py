"""Centralized application configuration via environment variables."""

from enum import StrEnum
from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(StrEnum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Read once at process start and treated as immutable afterwards.
    The API secret uses SecretStr to prevent accidental logging.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # --- App ---
    environment: Environment = Environment.DEVELOPMENT
    log_level: str = "DEBUG"
    app_name: str = "Storefront Bridge"
    app_handle: str = "storefront-bridge"

    # --- Server ---
    host: str = "0.0.0.0"
    port: int = 3000

    # --- Platform credentials ---
    shopify_api_key: str = ""
    shopify_api_secret: SecretStr | None = None

    # --- Platform endpoints ---
    # Tenant domains look like "<name>.<platform_domain>".
    platform_domain: str = "myshopify.com"
    platform_admin_url: str = "https://admin.shopify.com"

    # --- Token exchange ---
    token_exchange_timeout_seconds: float = 10.0

    # --- Convenience properties ---
    @property
    def mac_secret(self) -> str:
        """Shared secret for MAC computation, empty string when unset."""
        if self.shopify_api_secret is None:
            return ""
        return self.shopify_api_secret.get_secret_value()

    @property
    def admin_url(self) -> str:
        return self.platform_admin_url.rstrip("/")

    @property
    def frame_ancestors(self) -> str:
        """CSP value allowing framing by the admin origin and tenant subdomains."""
        return f"frame-ancestors {self.admin_url} https://*.{self.platform_domain};"

    @property
    def is_dev(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_prod(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        return self.environment == Environment.TESTING


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings singleton.

    Usage::

        from storefront_bridge.config import get_settings
        settings = get_settings()

    Or for dependency injection in FastAPI::

        @app.get("/")
        def root(settings: Settings = Depends(get_settings)):
            ...
    """
    return Settings()
