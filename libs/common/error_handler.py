"""Global exception handlers for consistent error responses.

Every handled error is rendered as ``{"detail": ..., "code": ...}`` so the
console frontend can show one alert format for all failures.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from libs.baas.errors import (
    AuthenticationError,
    BackendError,
    ConsoleError,
    InvalidTransitionError,
    StoreAccessError,
    StoreNotFoundError,
)
from libs.common.logging import get_logger

logger = get_logger(__name__)


def _error_response(status_code: int, exc: ConsoleError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "code": exc.code},
    )


async def store_not_found_handler(request: Request, exc: StoreNotFoundError):
    return _error_response(409, exc)


async def invalid_transition_handler(request: Request, exc: InvalidTransitionError):
    return _error_response(409, exc)


async def store_access_handler(request: Request, exc: StoreAccessError):
    logger.warning("Cross-store access rejected: %s", exc.message)
    return _error_response(403, exc)


async def authentication_handler(request: Request, exc: AuthenticationError):
    return _error_response(401, exc)


async def backend_error_handler(request: Request, exc: BackendError):
    logger.error(
        "Backend request failed",
        extra={"extra_fields": {
            "backend_code": exc.backend_code,
            "backend_status": exc.status_code,
            "error": exc.message,
        }},
    )
    return JSONResponse(
        status_code=502,
        content={
            "detail": "The store backend failed to handle the request. Please try again.",
            "code": exc.code,
        },
    )


def add_exception_handlers(app: FastAPI) -> None:
    """Register handlers for the console's domain errors."""
    app.add_exception_handler(StoreNotFoundError, store_not_found_handler)
    app.add_exception_handler(StoreAccessError, store_access_handler)
    app.add_exception_handler(InvalidTransitionError, invalid_transition_handler)
    app.add_exception_handler(AuthenticationError, authentication_handler)
    app.add_exception_handler(BackendError, backend_error_handler)
