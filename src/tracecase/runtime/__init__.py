"""Runtime - span lifecycle, export and logging."""

from .observability import (
    ConsoleExporter,
    Exporter,
    ExportResult,
    HttpExporter,
    InMemoryExporter,
    JsonExporter,
    NoOpExporter,
    Span,
    SpanContext,
    Tracer,
)

__all__ = [
    "ConsoleExporter",
    "Exporter",
    "ExportResult",
    "HttpExporter",
    "InMemoryExporter",
    "JsonExporter",
    "NoOpExporter",
    "Span",
    "SpanContext",
    "Tracer",
]
