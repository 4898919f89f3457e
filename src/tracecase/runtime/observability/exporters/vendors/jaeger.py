"""Jaeger exporter via its Zipkin-compatible collector API."""

from __future__ import annotations

from ..http import HttpExporter


def jaeger(endpoint: str = "http://localhost:9411/api/v2/spans", *, service_name: str = "tracecase",
           timeout: float = 2.0) -> HttpExporter:
    """Create an exporter for a Jaeger collector started with its Zipkin receiver enabled."""
    return HttpExporter(endpoint, service_name=service_name, timeout=timeout)
