"""Middleware modules for production-ready features"""
from cafe_api.middleware.monitoring import (
    MonitoringMiddleware,
    record_auth_failure,
    record_heartbeat,
    record_login,
    record_logout,
)
from cafe_api.middleware.rate_limit import limiter, get_rate_limit

__all__ = [
    "MonitoringMiddleware",
    "record_auth_failure",
    "record_heartbeat",
    "record_login",
    "record_logout",
    "limiter",
    "get_rate_limit",
]
