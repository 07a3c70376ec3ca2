import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from ..metrics import REQUEST_COUNT, REQUEST_LATENCY


def _endpoint_label(request: Request) -> str:
    # Route template when matched, raw path otherwise
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record request count and latency per method, route and status."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        status = "500"
        try:
            response = await call_next(request)
            status = str(response.status_code)
            return response
        finally:
            elapsed = time.perf_counter() - started
            endpoint = _endpoint_label(request)
            if REQUEST_LATENCY is not None:
                REQUEST_LATENCY.labels(method=request.method, endpoint=endpoint).observe(elapsed)
            if REQUEST_COUNT is not None:
                REQUEST_COUNT.labels(
                    method=request.method, endpoint=endpoint, http_status=status
                ).inc()
