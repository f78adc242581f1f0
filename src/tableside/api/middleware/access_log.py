from __future__ import annotations

import logging
import time

from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger("tableside.api.access")

REQUEST_COUNT = Counter(
    "tableside_http_requests_total",
    "Total number of HTTP requests",
    ["method", "route", "status_code"],
)
REQUEST_LATENCY = Histogram(
    "tableside_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "route"],
)

# probes and scrapes are frequent enough to drown the access log
QUIET_ROUTES = frozenset({"/health/live", "/health/ready", "/metrics"})


def _route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", "unmatched")


def _observe(method: str, route: str, status_code: int, started: float) -> float:
    elapsed = time.perf_counter() - started
    REQUEST_COUNT.labels(method=method, route=route, status_code=str(status_code)).inc()
    REQUEST_LATENCY.labels(method=method, route=route).observe(elapsed)
    return round(elapsed * 1000, 2)


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        method = request.method
        try:
            response = await call_next(request)
        except Exception:
            route = _route_template(request)
            logger.exception(
                "request_error",
                extra={
                    "method": method,
                    "path": request.url.path,
                    "route": route,
                    "status_code": 500,
                    "duration_ms": _observe(method, route, 500, started),
                },
            )
            raise

        route = _route_template(request)
        level = logging.DEBUG if route in QUIET_ROUTES else logging.INFO
        logger.log(
            level,
            "request_complete",
            extra={
                "method": method,
                "path": request.url.path,
                "route": route,
                "status_code": response.status_code,
                "duration_ms": _observe(method, route, response.status_code, started),
            },
        )
        return response
