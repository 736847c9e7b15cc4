"""
RFC 9457 Problem Details error handlers.

Every error response from the API uses ``application/problem+json`` with a
body matching ``ProblemDetail``. Handles:
- FastAPI validation errors (422)
- Explicit HTTPException raises (4xx/5xx)
- ``UpstreamError`` from the weather provider when no cache could serve (502)
- Unhandled exceptions (500)
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from weatherapp.api.schemas.common import ProblemDetail
from weatherapp.openweather.client import UpstreamError

logger = logging.getLogger(__name__)

_PROBLEM_JSON = "application/problem+json"


def _problem_response(
    status: int,
    title: str,
    detail: str | None = None,
    instance: str | None = None,
    extra: dict[str, Any] | None = None,
) -> JSONResponse:
    """Build a RFC 9457 Problem Details JSON response."""
    body = ProblemDetail(
        type="about:blank",
        title=title,
        status=status,
        detail=detail,
        instance=instance,
    )
    content = body.model_dump(exclude_none=True)
    if extra:
        content.update(jsonable_encoder(extra))
    return JSONResponse(status_code=status, content=content, media_type=_PROBLEM_JSON)


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    detail = "; ".join(
        f"{' -> '.join(str(x) for x in err.get('loc', []))}: "
        f"{err.get('msg', 'validation error')}"
        for err in errors
    )
    return _problem_response(
        status=422,
        title="Validation Error",
        detail=detail,
        instance=str(request.url),
        extra={"errors": errors},
    )


async def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return _problem_response(
        status=exc.status_code,
        title=exc.detail if isinstance(exc.detail, str) else str(exc.detail),
        instance=str(request.url),
    )


async def _upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    """Provider failed and neither cache could substitute."""
    logger.error("Weather upstream unavailable on %s: %s", request.url.path, exc)
    extra = {"upstream_status": exc.status} if exc.status is not None else None
    return _problem_response(
        status=502,
        title="Weather Provider Unavailable",
        detail=str(exc),
        instance=str(request.url),
        extra=extra,
    )


async def _generic_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """500 with a generic body; the traceback goes to the log only."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url)
    return _problem_response(
        status=500,
        title="Internal Server Error",
        detail="An unexpected error occurred. Check server logs for details.",
        instance=str(request.url),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI application."""
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(UpstreamError, _upstream_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _generic_exception_handler)  # type: ignore[arg-type]
