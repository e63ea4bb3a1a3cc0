"""OAuth install, embedded navigation and compliance webhooks for a Shopify app."""

__version__ = "0.1.0"
