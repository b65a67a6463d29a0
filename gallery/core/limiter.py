# File: gallery/core/limiter.py

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from gallery.core.config import settings


def get_client_ip(request: Request) -> str:
    """
    Resolve the client IP behind a proxy: first X-Forwarded-For hop,
    then X-Real-IP, then the socket address.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return get_remote_address(request)


# Counters live in Redis when configured, otherwise in process memory.
limiter = Limiter(
    key_func=get_client_ip,
    storage_uri=settings.redis_url or "memory://",
)

RATE_LIMIT_MESSAGES = {
    "comment": "Too many comments. Please wait a moment.",
    "register": "Too many registration attempts. Please try again later.",
    "upload": "Too many uploads. Please wait before trying again.",
}


async def custom_rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """
    Custom exception handler for rate-limited requests to return a JSON response.
    """
    path = request.url.path
    if path.endswith("/comment"):
        message = RATE_LIMIT_MESSAGES["comment"]
    elif path.endswith("/register"):
        message = RATE_LIMIT_MESSAGES["register"]
    elif path.endswith("/upload"):
        message = RATE_LIMIT_MESSAGES["upload"]
    else:
        message = "You have made too many requests in a short period. Please try again later."

    return JSONResponse(
        status_code=429,
        content={
            "error": message,
            "type": "rate_limited",
            "detail": f"Too Many Requests: rate limit exceeded ({exc.detail})",
        },
    )
