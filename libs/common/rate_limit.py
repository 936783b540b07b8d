"""Rate limiting for the public authentication endpoints.

Uses slowapi with in-process storage; limits are keyed by client IP.
"""

from functools import lru_cache

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from libs.common.config import get_settings
from libs.common.error_handler import error_response
from libs.common.logging import get_logger

logger = get_logger(__name__)


def _get_client_ip(request: Request) -> str:
    """
    Get client IP from request, handling proxies.

    Checks X-Forwarded-For header first (for proxied requests),
    then falls back to direct connection IP.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # First hop is the original client
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


@lru_cache
def get_limiter() -> Limiter:
    """
    Create and return a cached Limiter instance.
    """
    settings = get_settings()
    return Limiter(
        key_func=_get_client_ip,
        storage_uri="memory://",
        strategy="fixed-window",
        enabled=settings.RATE_LIMIT_ENABLED,
    )


limiter = get_limiter()


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """
    Render a rate limit rejection in the standard error envelope.
    """
    logger.warning("Rate limit exceeded for %s: %s", _get_client_ip(request), exc.detail)
    response = error_response(
        request,
        status_code=429,
        message=f"Rate limit exceeded: {exc.detail}",
    )
    response.headers["Retry-After"] = "60"
    return response


def auth_limit(func):
    """Apply the configured authentication rate limit."""
    return limiter.limit(get_settings().AUTH_RATE_LIMIT)(func)
