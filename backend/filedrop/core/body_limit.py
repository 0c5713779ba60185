"""
Request body size cap, applied before any handler sees the body.
"""
import logging

from fastapi import status
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from .exceptions import BodyLimitExceeded

logger = logging.getLogger(__name__)


class BodyLimitMiddleware:
    """
    Reject request bodies larger than ``max_body_size`` bytes.

    A declared Content-Length above the limit is answered with 413 right
    away. Bodies without a usable Content-Length are counted while they
    are received and ``BodyLimitExceeded`` is raised from ``receive``
    once the limit is crossed.
    """

    def __init__(self, app: ASGIApp, max_body_size: int):
        self.app = app
        self.max_body_size = max_body_size

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = None
        for name, value in scope.get("headers", []):
            if name == b"content-length":
                try:
                    content_length = int(value)
                except ValueError:
                    content_length = None
                break

        if content_length is not None and content_length > self.max_body_size:
            logger.info("Rejecting body of %d bytes, limit is %d", content_length, self.max_body_size)
            await self._reject(send)
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_size:
                    raise BodyLimitExceeded(self.max_body_size)
            return message

        await self.app(scope, limited_receive, send)

    @staticmethod
    async def _reject(send: Send) -> None:
        body = b"length limit exceeded"
        await send({
            "type": "http.response.start",
            "status": status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            "headers": [
                (b"content-type", b"text/plain; charset=utf-8"),
                (b"content-length", str(len(body)).encode("latin-1")),
            ],
        })
        await send({"type": "http.response.body", "body": body})
