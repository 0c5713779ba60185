"""
Streaming reader for ``multipart/form-data`` request bodies.

Parts are handed out one at a time as soon as their closing boundary has
been parsed, so the caller can persist a part before the bytes of the
next one are read from the socket.
"""
import logging
from collections import deque
from dataclasses import dataclass
from typing import AsyncIterator, Deque, List, Optional, Tuple

from fastapi import Request, status
from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header
from starlette.requests import ClientDisconnect

from ..core.exceptions import MalformedPart

logger = logging.getLogger(__name__)

INVALID_BOUNDARY = "Invalid `boundary` for `multipart/form-data` request"


@dataclass
class FormPart:
    """One fully received multipart field."""

    name: str
    filename: Optional[str]
    content_type: Optional[str]
    data: bytes


def _decode(value: bytes) -> str:
    # Undecodable bytes survive as surrogates and encode back unchanged
    return value.decode("utf-8", "surrogateescape")


def _get_boundary(content_type: Optional[str]) -> bytes:
    if not content_type:
        raise MalformedPart(status.HTTP_400_BAD_REQUEST, INVALID_BOUNDARY)
    mime_type, options = parse_options_header(content_type)
    boundary = options.get(b"boundary")
    if mime_type != b"multipart/form-data" or not boundary:
        raise MalformedPart(status.HTTP_400_BAD_REQUEST, INVALID_BOUNDARY)
    return boundary


class _PartCollector:
    """Callback target for ``MultipartParser`` that assembles whole parts."""

    def __init__(self) -> None:
        self.completed: Deque[FormPart] = deque()
        self.finished = False
        self._headers: List[Tuple[bytes, bytes]] = []
        self._header_field = b""
        self._header_value = b""
        self._chunks: List[bytes] = []

    @property
    def callbacks(self) -> dict:
        return {
            "on_part_begin": self.on_part_begin,
            "on_part_data": self.on_part_data,
            "on_part_end": self.on_part_end,
            "on_header_field": self.on_header_field,
            "on_header_value": self.on_header_value,
            "on_header_end": self.on_header_end,
            "on_end": self.on_end,
        }

    def on_part_begin(self) -> None:
        self._headers = []
        self._chunks = []

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_field += data[start:end]

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def on_header_end(self) -> None:
        self._headers.append((self._header_field.lower(), self._header_value))
        self._header_field = b""
        self._header_value = b""

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        self._chunks.append(data[start:end])

    def on_part_end(self) -> None:
        name = ""
        filename = None
        content_type = None
        for field, value in self._headers:
            if field == b"content-disposition":
                _, options = parse_options_header(value)
                name = _decode(options.get(b"name", b""))
                if b"filename" in options:
                    filename = _decode(options[b"filename"])
            elif field == b"content-type":
                content_type = _decode(value)
        self.completed.append(
            FormPart(
                name=name,
                filename=filename,
                content_type=content_type,
                data=b"".join(self._chunks),
            )
        )
        self._chunks = []

    def on_end(self) -> None:
        self.finished = True


async def iter_parts(request: Request) -> AsyncIterator[FormPart]:
    """
    Yield the parts of a multipart request body in arrival order.

    Raises MalformedPart for a missing boundary, broken framing, a body
    that ends before the closing boundary or a client that went away.
    """
    boundary = _get_boundary(request.headers.get("content-type"))
    collector = _PartCollector()
    parser = MultipartParser(boundary, collector.callbacks)

    try:
        async for chunk in request.stream():
            error = None
            if chunk:
                try:
                    parser.write(chunk)
                except MultipartParseError as e:
                    error = e
            # Parts completed before the broken one in this chunk are still handed out
            while collector.completed:
                yield collector.completed.popleft()
            if error is not None:
                raise MalformedPart(
                    status.HTTP_400_BAD_REQUEST, f"Error parsing the multipart body: {error}"
                ) from error
    except ClientDisconnect as e:
        logger.info("Client disconnected during upload")
        raise MalformedPart(status.HTTP_400_BAD_REQUEST, "client disconnected") from e

    parser.finalize()
    if not collector.finished:
        raise MalformedPart(status.HTTP_400_BAD_REQUEST, "incomplete multipart stream")
