"""Tests for structured logging configuration."""

import json
import logging
import re
from collections.abc import Generator
from io import StringIO

import pytest
import structlog

from storefront_bridge.logging_config import configure_logging


@pytest.fixture(autouse=True)
def _reset_structlog() -> Generator[None, None, None]:
    """Reset structlog state after each test."""
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.WARNING)


def _capture_log_output(
    environment: str, log_level: str = "DEBUG", **event: object
) -> str:
    """Configure logging, emit a message, return captured output."""
    configure_logging(environment=environment, log_level=log_level)

    stream = StringIO()
    root = logging.getLogger()
    if not root.handlers or not isinstance(root.handlers[0], logging.StreamHandler):
        raise RuntimeError("Expected configure_logging to set up a StreamHandler")

    original_stream = root.handlers[0].stream
    root.handlers[0].stream = stream

    logger = structlog.get_logger()
    logger.info("test_event", **(event or {"key": "value"}))

    root.handlers[0].stream = original_stream
    return stream.getvalue()


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_production_json(self) -> None:
        """Production environment produces valid JSON output."""
        output = _capture_log_output("production")
        parsed = json.loads(output)
        assert parsed["event"] == "test_event"
        assert parsed["key"] == "value"
        assert parsed["level"] == "info"

    def test_configure_development_console(self) -> None:
        """Development environment produces human-readable console output."""
        output = _capture_log_output("development")
        plain = re.sub(r"\x1b\[[0-9;]*m", "", output)
        assert "test_event" in plain
        assert "key=value" in plain

    def test_configure_sets_log_level(self) -> None:
        """Root logger level is set to the specified value."""
        configure_logging(log_level="WARNING")
        assert logging.getLogger().level == logging.WARNING

    def test_configure_includes_timestamp(self) -> None:
        """Production JSON output contains ISO timestamp."""
        output = _capture_log_output("production")
        parsed = json.loads(output)
        assert "timestamp" in parsed
        assert "T" in parsed["timestamp"]

    def test_oauth_values_redacted(self) -> None:
        """hmac, code and access_token never reach the log output."""
        output = _capture_log_output(
            "production",
            hmac="abc123",
            code="auth-code",
            access_token="shpat_secret",
            shop="acme.myshopify.com",
        )
        parsed = json.loads(output)
        assert parsed["hmac"] == "***REDACTED***"
        assert parsed["code"] == "***REDACTED***"
        assert parsed["access_token"] == "***REDACTED***"
        assert parsed["shop"] == "acme.myshopify.com"
        assert "shpat_secret" not in output

    def test_reconfigure_replaces_handler(self) -> None:
        configure_logging()
        configure_logging()
        assert len(logging.getLogger().handlers) == 1

    def test_transport_loggers_quieted(self) -> None:
        configure_logging(log_level="DEBUG")
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("uvicorn.access").level == logging.WARNING
