"""Tracing module: span identity, spans, and the tracer."""

from .attributes import validate_attribute, validate_attributes
from .context import SpanContext, TraceFlags
from .span import Event, Link, Span, SpanKind, Status, StatusCode
from .tracer import SpanContextManager, Tracer, configure_tracing, get_tracer

__all__ = [
    # Context
    "SpanContext",
    "TraceFlags",
    # Span
    "Event",
    "Link",
    "Span",
    "SpanKind",
    "Status",
    "StatusCode",
    # Attributes
    "validate_attribute",
    "validate_attributes",
    # Tracer
    "SpanContextManager",
    "Tracer",
    "configure_tracing",
    "get_tracer",
]
