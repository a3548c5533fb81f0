"""
Rate limiting for the HTTP surface.

Uses slowapi. Routes opt in with ``@limiter.limit``; the trade route
carries the heavy limit since it can move funds.
"""

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from tradesense.core.config import settings

limiter = Limiter(
    key_func=get_remote_address, default_limits=[settings.rate_limit_default]
)


async def rate_limit_exceeded_handler(
    _request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """Return a 429 in the common error body shape."""
    return JSONResponse(
        status_code=429,
        content={"error": "Rate limit exceeded", "detail": str(exc.detail)},
    )
