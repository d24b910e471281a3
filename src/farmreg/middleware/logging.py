"""Request logging and ID injection middleware."""

import time
import uuid

import structlog
from starlette.types import ASGIApp, Receive, Scope, Send

from farmreg.core.logging import get_logger, set_request_id


class RequestIDMiddleware:
    """
    Inject unique request ID into context.

    Every request gets a UUID. If X-Request-ID header exists, use it.
    Available in logs via structlog context vars; echoed back as a header.
    """

    def __init__(self, app: ASGIApp):
        self.app = app
        self.logger = get_logger(__name__)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        structlog.contextvars.clear_contextvars()
        headers = dict(scope.get("headers", []))
        request_id = headers.get(b"x-request-id", str(uuid.uuid4()).encode()).decode("latin1")
        set_request_id(request_id)
        started = time.perf_counter()

        self.logger.info(
            "request.start",
            method=scope["method"],
            path=scope["path"],
        )

        async def send_with_request_id(message):
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.append((b"x-request-id", request_id.encode("latin1")))
                message["headers"] = headers

                self.logger.info(
                    "request.complete",
                    status_code=message.get("status"),
                    duration_ms=int((time.perf_counter() - started) * 1000),
                )

            await send(message)

        await self.app(scope, receive, send_with_request_id)
