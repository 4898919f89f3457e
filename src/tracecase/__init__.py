"""tracecase - Distributed-tracing spans and span export.

A span records one unit of work: mutable while recording, frozen once
ended. Exporters ship batches of ended spans to a collector and report a
tri-state result so callers can decide whether to resubmit.

Quick Start:
    >>> from tracecase import Tracer, HttpExporter, SpanKind
    >>>
    >>> tracer = Tracer(
    ...     exporter=HttpExporter("http://localhost:9411/api/v2/spans", service_name="checkout"),
    ...     service_name="checkout",
    ... )
    >>> with tracer.span("load_cart", kind=SpanKind.SERVER) as span:
    ...     span.set_attribute("cart.items", 3)
    ...     span.add_event("cache_miss")

Manual Spans:
    >>> from tracecase import Span, SpanContext, StatusCode
    >>>
    >>> span = Span("reindex", SpanContext.generate())
    >>> span.set_attributes({"index": "users", "shards": 4})
    >>> span.end(StatusCode.ERROR, "shard 2 unavailable")
    >>> span.duration is not None
    True

Export Results:
    >>> result = exporter.export([span])
    >>> result.is_retryable  # FAILED_RETRYABLE: timeout, connection error, 5xx

Configuration (environment, TRACECASE_ prefix):
    >>> from tracecase import configure_tracing
    >>> configure_tracing()  # reads TRACECASE_EXPORTER_KIND, _ENDPOINT, _TIMEOUT ...
"""

__version__ = "0.1.0"

from .foundation import (
    AlreadyEndedError,
    AttributeTypeError,
    ConfigurationError,
    ErrorCode,
    InvalidTimestampError,
    NotRecordingError,
    TraceError,
    TracecaseError,
    TracecaseSettings,
    get_settings,
)
from .runtime.observability import (
    SUPPORTED_PATHS,
    ConsoleExporter,
    DefaultSpanConverter,
    Event,
    Exporter,
    ExportResult,
    HttpExporter,
    InMemoryExporter,
    JsonExporter,
    Link,
    NoOpExporter,
    Span,
    SpanContext,
    SpanConverter,
    SpanKind,
    Status,
    StatusCode,
    TraceFlags,
    Tracer,
    ZipkinSpanConverter,
    ZipkinV1SpanConverter,
    configure_logging,
    configure_tracing,
    get_logger,
    get_tracer,
    jaeger,
    zipkin,
)

__all__ = [
    "__version__",
    # Spans
    "Event",
    "Link",
    "Span",
    "SpanContext",
    "SpanKind",
    "Status",
    "StatusCode",
    "TraceFlags",
    # Tracer
    "Tracer",
    "configure_tracing",
    "get_tracer",
    # Export
    "Exporter",
    "ExportResult",
    "ConsoleExporter",
    "InMemoryExporter",
    "JsonExporter",
    "NoOpExporter",
    "HttpExporter",
    "SUPPORTED_PATHS",
    "SpanConverter",
    "DefaultSpanConverter",
    "ZipkinSpanConverter",
    "ZipkinV1SpanConverter",
    "jaeger",
    "zipkin",
    # Errors
    "ErrorCode",
    "TraceError",
    "TracecaseError",
    "NotRecordingError",
    "AlreadyEndedError",
    "InvalidTimestampError",
    "AttributeTypeError",
    "ConfigurationError",
    # Config & logging
    "TracecaseSettings",
    "get_settings",
    "configure_logging",
    "get_logger",
]
