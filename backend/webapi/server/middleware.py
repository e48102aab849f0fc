"""ASGI middleware for the API server."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = structlog.get_logger()

REQUEST_ID_HEADER = b"x-request-id"
_MAX_REQUEST_ID_LEN = 64


def _incoming_request_id(scope: Scope) -> str | None:
    for name, value in scope.get("headers", []):
        if name == REQUEST_ID_HEADER:
            decoded = value.decode("latin-1").strip()
            if 0 < len(decoded) <= _MAX_REQUEST_ID_LEN:
                return decoded
    return None


class RequestContextMiddleware:
    """Bind request_id, method and path into the structlog context for each request.

    Echoes the request id back in an X-Request-ID response header and logs one
    line per completed request with its status and duration.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = _incoming_request_id(scope) or uuid4().hex
        status_code = 500
        started = time.perf_counter()

        async def send_with_request_id(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                headers = list(message.get("headers", []))
                headers.append((REQUEST_ID_HEADER, request_id.encode("latin-1")))
                message["headers"] = headers
            await send(message)

        with structlog.contextvars.bound_contextvars(
            request_id=request_id,
            method=scope["method"],
            path=scope["path"],
        ):
            try:
                await self.app(scope, receive, send_with_request_id)
            finally:
                duration_ms = round((time.perf_counter() - started) * 1000, 2)
                logger.info("request completed", status=status_code, duration_ms=duration_ms)
