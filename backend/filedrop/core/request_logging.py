"""
Access log for every HTTP request.
"""
import logging
import time

from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger("filedrop.request")


class RequestLogMiddleware:
    """Log method, path, status and latency; client and server errors at ERROR level."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        status_code = 500

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            latency_ms = (time.perf_counter() - start) * 1000
            level = logging.ERROR if status_code >= 400 else logging.INFO
            logger.log(
                level,
                "%s %s -> %d (%.1f ms)",
                scope["method"],
                scope["path"],
                status_code,
                latency_ms,
            )
