"""Rate limiting middleware for API protection"""
from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request
from cafe_api.config import settings


def get_identifier(request: Request) -> str:
    """
    Get identifier for rate limiting

    Bearer-authenticated calls are keyed by token so that several admins
    behind one cafe router do not share a bucket; everything else is keyed
    by client address. Login overrides this and is always keyed by address.
    """
    auth = request.headers.get("authorization", "")
    if auth.lower().startswith("bearer ") and len(auth) > 7:
        return f"token:{auth[7:][-32:]}"

    return get_remote_address(request)


limiter = Limiter(
    key_func=get_identifier,
    default_limits=settings.RATE_LIMIT_DEFAULT,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)


# Rate limit configurations for different endpoints
RATE_LIMITS = {
    "login": settings.RATE_LIMIT_LOGIN,
}


def get_rate_limit(endpoint: str) -> str:
    """Get rate limit for specific endpoint"""
    return RATE_LIMITS.get(endpoint, settings.RATE_LIMIT_DEFAULT[0])
