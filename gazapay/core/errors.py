"""Domain exceptions and HTTP exception handling."""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger("gazapay.errors")


class InvalidStateError(ValueError):
    """A conversation state violates its invariants or cannot be decoded."""


class TemplateError(ValueError):
    """Response template overrides could not be loaded."""


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:  # noqa: D401
    """Return a generic JSON error response while logging the exception."""

    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_error",
            "message": "Something unexpected happened. Please try again later.",
        },
    )
