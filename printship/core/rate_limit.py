"""
Rate Limiting Configuration

Uses SlowAPI for in-memory rate limiting. The quote endpoint is the one that
matters: every request fans out to (stores x couriers) outbound calls.
"""
import logging

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from printship.core.config import settings

logger = logging.getLogger(__name__)


def get_client_ip(request: Request) -> str:
    """
    Get client IP, respecting X-Forwarded-For for proxied requests.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


limiter = Limiter(
    key_func=get_client_ip,
    enabled=settings.RATE_LIMIT_ENABLED,
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning(f"Rate limit exceeded: {get_client_ip(request)} on {request.url.path}")
    return JSONResponse(
        status_code=429,
        content={"error": f"Too many requests ({exc.detail}). Please try again shortly."},
        headers={"Retry-After": "60"},
    )
