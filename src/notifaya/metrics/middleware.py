"""Prometheus HTTP request metrics middleware for FastAPI.

Tracks:
- ``http_request_total`` (counter) — requests by method, route, status
- ``http_request_duration_seconds`` (histogram) — duration by method, route

Paths are labelled by their route template so unmatched URLs collapse
into a single ``<unmatched>`` series.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Match

if TYPE_CHECKING:
    from collections.abc import Callable

    from prometheus_client import CollectorRegistry
    from starlette.requests import Request
    from starlette.responses import Response

_UNMATCHED = "<unmatched>"

_LABELS = ("method", "path", "status_code")
_DURATION_LABELS = ("method", "path")


def _route_path(request: Request) -> str:
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return getattr(route, "path", _UNMATCHED)
    return _UNMATCHED


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Starlette middleware that records request count and duration."""

    def __init__(self, app: object, *, registry: CollectorRegistry) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self._request_count = Counter(
            "http_request_total",
            "Total HTTP requests",
            _LABELS,
            registry=registry,
        )
        self._request_duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            _DURATION_LABELS,
            registry=registry,
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:  # type: ignore[type-arg]
        """Wrap each request with timing and counting."""
        method = request.method
        path = _route_path(request)
        start = time.monotonic()
        status = "500"
        try:
            response: Response = await call_next(request)
            status = str(response.status_code)
            return response
        finally:
            self._request_count.labels(method=method, path=path, status_code=status).inc()
            self._request_duration.labels(method=method, path=path).observe(
                time.monotonic() - start
            )
