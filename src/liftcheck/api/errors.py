"""Exception handlers rendering the ``{"error": code}`` response contract."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from liftcheck.core.errors import (
    InternalError,
    InvalidPayloadError,
    LiftCheckError,
    RateLimitedError,
)

logger = logging.getLogger(__name__)

RETRYABLE_RETRY_AFTER_SECONDS = 1


def _error_response(status_code: int, code: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": code}, headers=headers)


async def liftcheck_error_handler(request: Request, exc: LiftCheckError) -> JSONResponse:
    """Map taxonomy errors to their status; internals are only logged.

    Retryable internal failures keep the generic body but carry a short
    ``Retry-After`` so clients can tell them from fatal ones.
    """
    headers = None
    if isinstance(exc, RateLimitedError) and exc.retry_after is not None:
        headers = {"Retry-After": str(int(exc.retry_after) + 1)}
    elif exc.retryable:
        logger.warning("Retryable failure on %s %s: %s", request.method, request.url.path, exc)
        headers = {"Retry-After": str(RETRYABLE_RETRY_AFTER_SECONDS)}
    elif isinstance(exc, InternalError):
        logger.error("Internal error on %s %s: %s", request.method, request.url.path, exc)
    return _error_response(exc.status_code, exc.code, headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Collapse request validation failures into ``invalid_payload``."""
    logger.debug("Invalid payload on %s: %s", request.url.path, exc.errors())
    return _error_response(InvalidPayloadError.status_code, InvalidPayloadError.code)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log with traceback, answer with the generic code."""
    logger.error(
        "Unhandled error on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=exc,
    )
    return _error_response(InternalError.status_code, InternalError.code)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers on ``app``."""
    app.add_exception_handler(LiftCheckError, liftcheck_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_error_handler)
