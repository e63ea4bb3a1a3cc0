"""Run the HTTP server.

Usage::

    python -m storefront_bridge [--host HOST] [--port PORT]

Defaults come from ``HOST`` / ``PORT`` in the environment.
"""

from __future__ import annotations

import argparse

import uvicorn

from storefront_bridge.config import get_settings


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="storefront_bridge",
        description="OAuth install and embedded app backend",
    )
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    # Logging is configured in the app lifespan
    uvicorn.run(
        "storefront_bridge.api.app:app",
        host=args.host,
        port=args.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
