"""
Rate limiting for public endpoints (slowapi).

Keyed on the caller's forwarded address. Counters live in slowapi's
in-memory storage, so they are per process and expire with their window.
"""
import logging
from typing import Optional

from fastapi import FastAPI, Request
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.config import Settings, get_settings

logger = logging.getLogger(__name__)


def get_forwarded_address(request: Request) -> Optional[str]:
    """Caller address as reported by the proxy in front of us"""
    forwarded = request.headers.get("x-forwarded-for") or request.headers.get("cf-connecting-ip")
    if not forwarded:
        return None
    return forwarded.split(",")[0].strip() or None


def get_client_address(request: Request) -> str:
    """Rate limit key: forwarded address, else the socket peer"""
    return get_forwarded_address(request) or (request.client.host if request.client else "unknown")


def rate_limit_value(settings: Settings) -> str:
    """slowapi limit string, e.g. "5/60 seconds" """
    return f"{settings.rate_limit_max_requests}/{settings.rate_limit_window_seconds} seconds"


def contact_rate_limit() -> str:
    return rate_limit_value(get_settings())


limiter = Limiter(key_func=get_client_address, headers_enabled=True)


def setup_rate_limiting(app: FastAPI, settings: Settings) -> None:
    """
    Attach the limiter to the application

    Args:
        app: FastAPI application instance
        settings: Process settings (enable flag)
    """
    limiter.enabled = settings.rate_limit_enabled
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    if not settings.rate_limit_enabled:
        logger.warning("Rate limiting is disabled")
