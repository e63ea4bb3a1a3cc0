"""HTTP middleware: request logging and embed framing headers."""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from storefront_bridge.webhooks import WEBHOOK_SHOP_HEADER

logger = structlog.get_logger()


def _request_shop(request: Request) -> str | None:
    """Shop domain named by the request, from the query or webhook header."""
    return request.query_params.get("shop") or request.headers.get(
        WEBHOOK_SHOP_HEADER
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One ``http_request`` event per request, tagged with the shop if known.

    The liveness probe and API docs are not logged. Query strings are
    never logged; they carry the OAuth ``code`` and ``hmac``.
    """

    SKIP_PATHS: frozenset[str] = frozenset(
        {"/", "/docs", "/openapi.json", "/redoc"}
    )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in self.SKIP_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "http_request",
            method=request.method,
            path=path,
            shop=_request_shop(request),
            status_code=response.status_code,
            latency_ms=int((time.perf_counter() - started) * 1000),
        )
        return response


class EmbedFramingMiddleware(BaseHTTPMiddleware):
    """Allow the embedded app routes to be framed by the platform admin.

    Sets ``Content-Security-Policy: frame-ancestors ...`` and drops any
    ``X-Frame-Options`` on responses under ``path_prefix``.
    """

    def __init__(
        self, app: ASGIApp, *, frame_ancestors: str, path_prefix: str = "/app"
    ) -> None:
        super().__init__(app)
        self._frame_ancestors = frame_ancestors
        self._path_prefix = path_prefix

    def _applies(self, path: str) -> bool:
        return path == self._path_prefix or path.startswith(f"{self._path_prefix}/")

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        if self._applies(request.url.path):
            response.headers["Content-Security-Policy"] = self._frame_ancestors
            if "x-frame-options" in response.headers:
                del response.headers["x-frame-options"]
        return response
