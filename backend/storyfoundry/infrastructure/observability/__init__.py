"""Observability utilities (metrics, logging, tracing)."""

from .metrics import (
    REQUEST_COUNT,
    REQUEST_LATENCY,
    PROJECT_CREATION_TOTAL,
    IP_TIMESTAMP_TOTAL,
    SUPABASE_REQUEST_DURATION,
    render_metrics,
    METRICS_CONTENT_TYPE,
)
from .structured_logging import configure_structlog
from .tracing import setup_tracing, get_tracer
from .middleware import ObservabilityMiddleware

__all__ = [
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "PROJECT_CREATION_TOTAL",
    "IP_TIMESTAMP_TOTAL",
    "SUPABASE_REQUEST_DURATION",
    "render_metrics",
    "METRICS_CONTENT_TYPE",
    "configure_structlog",
    "setup_tracing",
    "get_tracer",
    "ObservabilityMiddleware",
]
