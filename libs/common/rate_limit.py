"""Rate limiting for the merchant console API.

Uses slowapi; storage defaults to in-process memory and can point at Redis
through RATE_LIMIT_STORAGE_URI when several workers share limits.
"""

from functools import lru_cache
from typing import Callable

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from libs.common.config import get_settings


def _get_client_ip(request: Request) -> str:
    """
    Client IP, honouring X-Forwarded-For when the API sits behind a proxy.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


@lru_cache
def get_limiter() -> Limiter:
    """Create and return a cached Limiter instance."""
    settings = get_settings()
    return Limiter(
        key_func=_get_client_ip,
        default_limits=["120/minute"],
        storage_uri=settings.RATE_LIMIT_STORAGE_URI,
        strategy="fixed-window",
        enabled=settings.RATE_LIMIT_ENABLED,
    )


limiter = get_limiter()


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """
    Return a JSON 429 with a Retry-After header.
    """
    retry_after = exc.detail.split("per")[0].strip() if exc.detail else "1 minute"

    return JSONResponse(
        status_code=429,
        content={
            "detail": f"Rate limit exceeded. Try again in {retry_after}.",
            "code": "RATE_LIMIT_EXCEEDED",
        },
        headers={"Retry-After": str(getattr(exc, "retry_after", 60))},
    )


def auth_limit(func: Callable) -> Callable:
    """Strict limit for login/register/password endpoints (5/minute)."""
    return limiter.limit("5/minute")(func)


def ai_limit(func: Callable) -> Callable:
    """Limit for endpoints that call the hosted model (20/minute)."""
    return limiter.limit("20/minute")(func)
