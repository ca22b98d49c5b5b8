"""API assembly helpers."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..core.errors import AccountError, StoreError
from .middleware import apply_security_headers
from .routers import ALL_ROUTERS

logger = logging.getLogger(__name__)


def register_routes(app: FastAPI) -> None:
    """Attach all application routers to the given app."""

    for router in ALL_ROUTERS:
        app.include_router(router)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


async def _account_error(request: Request, exc: AccountError) -> JSONResponse:
    if isinstance(exc, StoreError):
        logger.error("Store error on %s %s: %s", request.method, request.url.path, exc)
    return _error(exc.status_code, exc.public_message)


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return _error(404, "Endpoint not found")
    return _error(exc.status_code, str(exc.detail))


async def _request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return _error(400, "Invalid account data")


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    # Runs outside the middleware stack, so headers are added here.
    return apply_security_headers(_error(500, "Internal server error"))


def register_error_handlers(app: FastAPI) -> None:
    """Render every failure as an ``{"error": ...}`` body."""

    app.add_exception_handler(AccountError, _account_error)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)
    app.add_exception_handler(Exception, _unhandled_error)


__all__ = ["register_error_handlers", "register_routes"]
