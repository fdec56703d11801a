"""HTTP metrics middleware.

Records request count, latency, in-flight requests and payload sizes for
every request handled by the application. The ``path`` label is the
matched route template (``/api/v1/auth/me``), never the raw URL, so
path parameters cannot blow up label cardinality.
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.routing import Match
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR
from starlette.types import ASGIApp

from stockpile.infrastructure.observability import HTTPMetrics

logger = logging.getLogger(__name__)

UNMATCHED_PATH = "unmatched"


def _route_template(request: Request) -> str:
    for route in request.app.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return getattr(route, "path", UNMATCHED_PATH)
    return UNMATCHED_PATH


def _content_length(headers) -> int:
    value = headers.get("content-length")
    if value is None or not value.isdigit():
        return 0
    return int(value)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware feeding HTTPMetrics."""

    def __init__(self, app: ASGIApp, metrics: HTTPMetrics):
        super().__init__(app)
        self._metrics = metrics

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        self._metrics.active_requests.inc()
        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            # Unhandled errors are answered with 500 further out
            self._observe(request, HTTP_500_INTERNAL_SERVER_ERROR, start_time, 0)
            raise
        finally:
            self._metrics.active_requests.dec()

        self._observe(
            request,
            response.status_code,
            start_time,
            _content_length(response.headers),
        )
        return response

    def _observe(
        self,
        request: Request,
        status_code: int,
        start_time: float,
        response_size: int,
    ) -> None:
        duration = time.perf_counter() - start_time
        path = _route_template(request)
        self._metrics.observe(
            method=request.method,
            path=path,
            status=status_code,
            duration_seconds=duration,
            request_size=_content_length(request.headers),
            response_size=response_size,
        )
        logger.debug(
            "%s %s -> %s (%.3fs)",
            request.method,
            path,
            status_code,
            duration,
        )
