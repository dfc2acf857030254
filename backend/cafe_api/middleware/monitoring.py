"""Monitoring and observability middleware"""
import time
import uuid
from typing import Callable
from fastapi import Request, Response
from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware
from cafe_api.utils.logger import logger


# ===== Traffic classes =====

TRAFFIC_LOGIN = "login"
TRAFFIC_HEARTBEAT = "heartbeat"
TRAFFIC_LOGOUT = "logout"
TRAFFIC_CONSOLE = "console"
TRAFFIC_SYSTEM = "system"

_SESSION_PATHS = {
    "/auth/login": TRAFFIC_LOGIN,
    "/auth/heartbeat": TRAFFIC_HEARTBEAT,
    "/auth/logout": TRAFFIC_LOGOUT,
}

_SYSTEM_PREFIXES = ("/health", "/metrics", "/docs", "/redoc", "/openapi.json")

# Sent on a timer or on unload by every open console
_QUIET_TRAFFIC = {TRAFFIC_HEARTBEAT, TRAFFIC_LOGOUT}

SLOW_REQUEST_SECONDS = 1.0


def classify_traffic(path: str) -> str:
    """Map a request path to its traffic class"""
    path = path.rstrip("/") or "/"
    if path in _SESSION_PATHS:
        return _SESSION_PATHS[path]
    if path == "/" or path.startswith(_SYSTEM_PREFIXES):
        return TRAFFIC_SYSTEM
    return TRAFFIC_CONSOLE


# ===== Prometheus Metrics =====

# Request metrics
http_requests_total = Counter(
    "cafe_console_http_requests_total",
    "Total HTTP requests",
    ["method", "traffic", "endpoint", "status"]
)

http_request_duration_seconds = Histogram(
    "cafe_console_http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "traffic", "endpoint"]
)

# Error metrics
http_errors_total = Counter(
    "cafe_console_http_errors_total",
    "Total HTTP errors",
    ["method", "traffic", "endpoint", "status"]
)

authentication_failures_total = Counter(
    "cafe_console_authentication_failures_total",
    "Total authentication failures",
    ["reason"]  # missing_token, invalid_token, unknown_account, bad_credentials
)

# Session and presence metrics
logins_total = Counter(
    "cafe_console_logins_total",
    "Total login attempts",
    ["outcome"]  # success, failure
)

heartbeats_total = Counter(
    "cafe_console_heartbeats_total",
    "Total heartbeats accepted",
    ["role"]
)

logouts_total = Counter(
    "cafe_console_logouts_total",
    "Total logouts (explicit or unload)",
)


def _route_template(request: Request) -> str:
    """Matched route path (``/admins/{admin_id}``), or the raw path if none matched"""
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class MonitoringMiddleware(BaseHTTPMiddleware):
    """Tags each request with an id and a traffic class, and records metrics.

    Heartbeat and logout beacons are counted like everything else but stay
    out of the slow-request warning and the per-request debug log.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        traffic = classify_traffic(request.url.path)
        request_id = request.headers.get("x-request-id") or f"req_{uuid.uuid4().hex[:16]}"
        request.state.request_id = request_id
        request.state.traffic = traffic

        try:
            response = await call_next(request)
        except Exception as e:
            self._observe(request, traffic, 500, time.perf_counter() - started)
            logger.error(
                f"Request failed: {request.method} {request.url.path}",
                extra={"request_id": request_id, "traffic": traffic, "error": str(e)},
                exc_info=True
            )
            raise

        duration = self._observe(request, traffic, response.status_code, time.perf_counter() - started)

        if traffic not in _QUIET_TRAFFIC:
            log_extra = {"request_id": request_id, "traffic": traffic, "duration": duration,
                         "status": response.status_code}
            if duration > SLOW_REQUEST_SECONDS:
                logger.warning(f"Slow request detected: {request.method} {request.url.path}", extra=log_extra)
            else:
                logger.debug(f"{request.method} {request.url.path} {response.status_code}", extra=log_extra)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration:.3f}s"
        return response

    @staticmethod
    def _observe(request: Request, traffic: str, status: int, duration: float) -> float:
        endpoint = _route_template(request)
        http_requests_total.labels(
            method=request.method, traffic=traffic, endpoint=endpoint, status=status
        ).inc()
        http_request_duration_seconds.labels(
            method=request.method, traffic=traffic, endpoint=endpoint
        ).observe(duration)
        if status >= 400:
            http_errors_total.labels(
                method=request.method, traffic=traffic, endpoint=endpoint, status=status
            ).inc()
        return duration


def record_auth_failure(reason: str):
    """Record authentication failure"""
    authentication_failures_total.labels(reason=reason).inc()


def record_login(success: bool):
    """Record login attempt outcome"""
    logins_total.labels(outcome="success" if success else "failure").inc()


def record_heartbeat(role: str):
    """Record an accepted heartbeat"""
    heartbeats_total.labels(role=role).inc()


def record_logout():
    """Record a logout"""
    logouts_total.inc()
