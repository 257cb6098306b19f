"""Exception handlers for the dashboard API.

Every error leaves the API as ``{"error": CODE, "message": ..., "details": ...}``
so the admin UI can branch on ``error`` alone. Register once with
register_exception_handlers(app).
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.domain.exceptions import DashboardException

logger = logging.getLogger(__name__)

_ERROR_CODE_STATUS: dict[str, int] = {
    "RESOURCE_NOT_FOUND": 404,
    "VALIDATION_ERROR": 400,
    "AGGREGATION_ERROR": 503,
    "STORE_ERROR": 502,
    "SERVICE_UNAVAILABLE": 503,
}


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "-")


def _error(status: int, code: str, message: Any, details: Any = None) -> JSONResponse:
    content: dict[str, Any] = {"error": code, "message": message}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status, content=content)


def _dashboard_exception_handler(request: Request, exc: DashboardException) -> JSONResponse:
    status = _ERROR_CODE_STATUS.get(exc.error_code, 400)
    if status >= 500:
        # Store and aggregation failures are upstream problems worth a trace.
        logger.warning(
            "[%s] %s %s -> %s: %s",
            _request_id(request),
            request.method,
            request.url.path,
            exc.error_code,
            exc.message,
        )
    return JSONResponse(status_code=status, content=exc.to_dict())


def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # errors() may carry the raising ValueError in ctx; encode it to plain JSON.
    return _error(422, "VALIDATION_ERROR", "Request validation failed", jsonable_encoder(exc.errors()))


def _rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.info("[%s] rate limited %s (%s)", _request_id(request), request.url.path, exc.detail)
    return _error(429, "RATE_LIMITED", f"Rate limit exceeded: {exc.detail}")


def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, "HTTP_ERROR", exc.detail)


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("[%s] Unhandled exception: %s", _request_id(request), exc)
    detail: Any = str(exc) if get_settings().debug else "Internal server error"
    return _error(500, "INTERNAL_ERROR", detail)


def register_exception_handlers(app: FastAPI) -> None:
    """Register the handlers above; RateLimitExceeded before the generic one."""
    app.add_exception_handler(DashboardException, _dashboard_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
