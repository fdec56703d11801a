"""Observability: Prometheus metrics."""

from stockpile.infrastructure.observability.metrics import (
    CONTENT_TYPE_LATEST,
    AuthMetrics,
    HTTPMetrics,
    render_latest,
)

__all__ = [
    "CONTENT_TYPE_LATEST",
    "AuthMetrics",
    "HTTPMetrics",
    "render_latest",
]
