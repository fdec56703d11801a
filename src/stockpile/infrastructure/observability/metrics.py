"""Prometheus metrics for the HTTP layer and authentication.

Metric families are registered on an explicit ``CollectorRegistry`` passed
in by the caller, so each application instance (and each test) owns its
own registry instead of sharing the process-wide default one.
"""

from __future__ import annotations

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

DEFAULT_DURATION_BUCKETS = (
    0.005, 0.01, 0.025, 0.05, 0.075, 0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0, 7.5, 10.0,
)
SIZE_BUCKETS = tuple(100 * 10**i for i in range(8))


class HTTPMetrics:
    """Request count, latency, in-flight and payload size metrics."""

    def __init__(self, registry: CollectorRegistry):
        self.requests_total = Counter(
            "http_requests_total",
            "Total number of HTTP requests",
            ["method", "path", "status"],
            registry=registry,
        )
        self.request_duration = Histogram(
            "http_request_duration_seconds",
            "Duration of HTTP requests in seconds",
            ["method", "path", "status"],
            buckets=DEFAULT_DURATION_BUCKETS,
            registry=registry,
        )
        self.active_requests = Gauge(
            "http_active_connections",
            "Number of in-flight HTTP requests",
            registry=registry,
        )
        self.request_size = Histogram(
            "http_request_size_bytes",
            "Size of HTTP requests in bytes",
            ["method", "path"],
            buckets=SIZE_BUCKETS,
            registry=registry,
        )
        self.response_size = Histogram(
            "http_response_size_bytes",
            "Size of HTTP responses in bytes",
            ["method", "path", "status"],
            buckets=SIZE_BUCKETS,
            registry=registry,
        )

    def observe(
        self,
        method: str,
        path: str,
        status: int,
        duration_seconds: float,
        request_size: int,
        response_size: int,
    ) -> None:
        """Record one completed request."""
        status_label = str(status)
        self.requests_total.labels(method, path, status_label).inc()
        self.request_duration.labels(method, path, status_label).observe(
            duration_seconds,
        )
        self.request_size.labels(method, path).observe(request_size)
        self.response_size.labels(method, path, status_label).observe(response_size)


class AuthMetrics:
    """Authentication attempt and JWT lifecycle counters."""

    def __init__(self, registry: CollectorRegistry):
        self.auth_attempts = Counter(
            "auth_attempts_total",
            "Total number of authentication attempts",
            ["type", "status"],  # type: signin/signup, status: success/failure
            registry=registry,
        )
        self.tokens_issued = Counter(
            "jwt_tokens_issued_total",
            "Total number of JWT tokens issued",
            registry=registry,
        )
        self.tokens_validated = Counter(
            "jwt_tokens_validated_total",
            "Total number of JWT token validations",
            ["status"],  # status: valid/invalid/expired
            registry=registry,
        )

    def record_auth_attempt(self, auth_type: str, success: bool) -> None:
        self.auth_attempts.labels(auth_type, "success" if success else "failure").inc()

    def record_tokens_issued(self, count: int = 1) -> None:
        self.tokens_issued.inc(count)

    def record_token_validation(self, status: str) -> None:
        self.tokens_validated.labels(status).inc()


def render_latest(registry: CollectorRegistry) -> bytes:
    """Render the registry in the Prometheus text exposition format."""
    return generate_latest(registry)
