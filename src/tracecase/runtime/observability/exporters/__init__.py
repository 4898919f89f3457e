"""Network exporters and span converters."""

from .converter import DefaultSpanConverter, SpanConverter
from .http import SUPPORTED_PATHS, HttpExporter, classify_status, validate_endpoint
from .vendors import ZipkinSpanConverter, ZipkinV1SpanConverter, jaeger, zipkin

__all__ = [
    "SUPPORTED_PATHS",
    "DefaultSpanConverter",
    "HttpExporter",
    "SpanConverter",
    "ZipkinSpanConverter",
    "ZipkinV1SpanConverter",
    "classify_status",
    "jaeger",
    "validate_endpoint",
    "zipkin",
]
