"""structlog setup for the OAuth backend.

Events go through the stdlib root logger so uvicorn and httpx records share
one handler. Production renders JSON lines; other environments use the
colored console renderer. OAuth credentials (``code``, ``hmac``, tokens,
client secret) never reach the output.
"""

import logging
import sys

import structlog

REDACTED = "***REDACTED***"

SENSITIVE_KEYS: frozenset[str] = frozenset(
    {
        "access_token",
        "authorization",
        "client_secret",
        "code",
        "hmac",
        "password",
        "secret",
        "token",
    }
)

# Per-request chatter from these is covered by RequestLoggingMiddleware
QUIET_LOGGERS: tuple[str, ...] = ("uvicorn.access", "httpx")


def _redact_sensitive_keys(
    logger: logging.Logger,
    method_name: str,
    event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    for key in event_dict:
        if key.lower() in SENSITIVE_KEYS:
            event_dict[key] = REDACTED
    return event_dict


def _renderer(environment: str) -> structlog.types.Processor:
    if environment == "production":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True)


def configure_logging(
    environment: str = "development",
    log_level: str = "INFO",
) -> None:
    """Install the processor chain and a single stdout handler.

    Safe to call again (the lifespan does on every startup); the root
    handler list is replaced, not appended to.

    Args:
        environment: ``production`` selects JSON output.
        log_level: Root level name, e.g. ``DEBUG`` or ``warning``.
    """
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _redact_sensitive_keys,
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]
    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(environment),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(log_level.upper())

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
