"""ASGI middleware for request logging and in-flight tracking."""

from __future__ import annotations

import time

import structlog
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from episodarr.infrastructure.graceful_shutdown import GracefulShutdown

log = structlog.get_logger(__name__)


class RequestLogMiddleware:
    """Counts in-flight requests and logs one ``http_request`` event each.

    Plain ASGI rather than ``BaseHTTPMiddleware``: ``receive`` reaches the
    endpoint untouched, so ``Request.is_disconnected()`` still sees the
    client's ``http.disconnect``.

    Args:
        app: ASGI application.
        graceful_shutdown: Tracker that drains in-flight requests on shutdown.
    """

    def __init__(self, app: ASGIApp, graceful_shutdown: GracefulShutdown) -> None:
        self.app = app
        self._gs = graceful_shutdown

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        status_code = 500

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        self._gs.request_started()
        start = time.perf_counter()
        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            self._gs.request_finished()
            duration_ms = (time.perf_counter() - start) * 1000.0
            client = scope.get("client")
            log.info(
                "http_request",
                method=scope["method"],
                path=scope["path"],
                query=scope.get("query_string", b"").decode("latin-1"),
                status_code=status_code,
                duration_ms=round(duration_ms, 2),
                client_host=client[0] if client else None,
            )
