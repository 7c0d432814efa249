"""Prometheus metrics definitions."""
from __future__ import annotations

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

REQUEST_COUNT = Counter(
    "storyfoundry_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

REQUEST_LATENCY = Histogram(
    "storyfoundry_http_request_duration_seconds",
    "HTTP request latency",
    ["method", "path"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10],
)

PROJECT_CREATION_TOTAL = Counter(
    "storyfoundry_project_creation_total",
    "Project creation attempts by outcome",
    ["outcome"],
)

IP_TIMESTAMP_TOTAL = Counter(
    "storyfoundry_ip_timestamp_total",
    "IP timestamp writes by outcome",
    ["outcome"],
)

SUPABASE_REQUEST_DURATION = Histogram(
    "storyfoundry_supabase_request_duration_seconds",
    "Supabase API call duration",
    ["operation"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5],
)


def render_metrics() -> bytes:
    return generate_latest()


METRICS_CONTENT_TYPE = CONTENT_TYPE_LATEST
