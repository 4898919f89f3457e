"""Observability runtime: spans, tracer, exporters and structured logging.

Quick Start:
    >>> from tracecase.runtime.observability import Tracer, HttpExporter, SpanKind
    >>>
    >>> tracer = Tracer(exporter=HttpExporter("http://zipkin:9411/api/v2/spans"), service_name="checkout")
    >>> with tracer.span("charge_card", kind=SpanKind.CLIENT) as span:
    ...     span.set_attribute("payment.amount", 42.5)

Manual span lifecycle:
    >>> span = Span("work", SpanContext.generate())
    >>> span.add_event("started")
    >>> span.end()
    >>> exporter.export([span])
    <ExportResult.SUCCESS: 'success'>
"""

from .exporter import (
    ConsoleExporter,
    Exporter,
    ExportResult,
    InMemoryExporter,
    JsonExporter,
    NoOpExporter,
)
from .exporters import (
    SUPPORTED_PATHS,
    DefaultSpanConverter,
    HttpExporter,
    SpanConverter,
    ZipkinSpanConverter,
    ZipkinV1SpanConverter,
    jaeger,
    zipkin,
)
from .logging import configure_logging, get_logger, log_context
from .tracing import (
    Event,
    Link,
    Span,
    SpanContext,
    SpanKind,
    Status,
    StatusCode,
    TraceFlags,
    Tracer,
    configure_tracing,
    get_tracer,
)

__all__ = [
    # Tracing
    "Event",
    "Link",
    "Span",
    "SpanContext",
    "SpanKind",
    "Status",
    "StatusCode",
    "TraceFlags",
    "Tracer",
    "configure_tracing",
    "get_tracer",
    # Exporters
    "Exporter",
    "ExportResult",
    "ConsoleExporter",
    "JsonExporter",
    "InMemoryExporter",
    "NoOpExporter",
    "HttpExporter",
    "SUPPORTED_PATHS",
    "SpanConverter",
    "DefaultSpanConverter",
    "ZipkinSpanConverter",
    "ZipkinV1SpanConverter",
    "jaeger",
    "zipkin",
    # Logging
    "configure_logging",
    "get_logger",
    "log_context",
]
