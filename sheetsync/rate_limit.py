"""Rate limiting for the sync endpoint.

Uses slowapi with per-instance memory storage. Kept in its own module so
both main.py and api.py can import the limiter without a circular import.
"""

from fastapi import Request
from fastapi.responses import PlainTextResponse
from loguru import logger
from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)


def rate_limit_exceeded_handler(request: Request, _exc: Exception) -> PlainTextResponse:
    """Handle rate limit exceeded errors."""
    logger.warning(
        "Rate limit exceeded",
        extra={"path": request.url.path, "client": get_remote_address(request)},
    )
    return PlainTextResponse("Too Many Requests", status_code=429)
