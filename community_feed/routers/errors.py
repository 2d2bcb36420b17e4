"""Translate feed errors into HTTP responses."""
from __future__ import annotations

import logging

from fastapi import Request, status
from starlette.responses import JSONResponse

from ..errors import (
    AuthError,
    ConfigurationError,
    FeedError,
    FetchError,
    ForbiddenError,
    NotFoundError,
    UploadError,
    ValidationFailedError,
    WriteError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[FeedError], int], ...] = (
    (AuthError, status.HTTP_401_UNAUTHORIZED),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ValidationFailedError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (UploadError, status.HTTP_502_BAD_GATEWAY),
    (FetchError, status.HTTP_502_BAD_GATEWAY),
    (WriteError, status.HTTP_502_BAD_GATEWAY),
    (ConfigurationError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def status_for(exc: FeedError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def feed_error_handler(request: Request, exc: FeedError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


__all__ = ["feed_error_handler", "status_for"]
