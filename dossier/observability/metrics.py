"""Prometheus metric definitions for the HTTP surface."""

from prometheus_client import CollectorRegistry, Counter

REGISTRY = CollectorRegistry()

REQUESTS = Counter(
    "dossier_http_requests_total",
    "HTTP requests",
    ["method", "path", "status"],
    registry=REGISTRY,
)
