"""
Failure kinds raised by the file storage core and their HTTP mapping.

Every handler that touches storage or the request body lets these
propagate; ``register_exception_handlers`` turns them into responses in
one place.
"""
from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse


class FileDropError(Exception):
    """Base class for failures surfaced to HTTP clients."""


class MalformedPart(FileDropError):
    """The transport could not deliver a multipart field (bad framing, size cap, ...)."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class BodyLimitExceeded(MalformedPart):
    """The request body crossed the configured upload ceiling."""

    def __init__(self, limit: int):
        super().__init__(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "length limit exceeded")
        self.limit = limit


class StorageFailure(FileDropError):
    """An insert, fetch, delete or listing query failed in the database."""

    def __init__(self, message: str, cause: Exception):
        super().__init__(f"{message} -- {cause}")
        self.message = message
        self.cause = cause


async def _malformed_part_handler(_request: Request, exc: MalformedPart):
    return PlainTextResponse(exc.message, status_code=exc.status_code)


async def _storage_failure_handler(_request: Request, exc: StorageFailure):
    # The cause stays in the log, the client only gets the operation summary
    return PlainTextResponse(exc.message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the mapping from failure kind to status/body on ``app``."""
    app.add_exception_handler(MalformedPart, _malformed_part_handler)
    app.add_exception_handler(StorageFailure, _storage_failure_handler)
