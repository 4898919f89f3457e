"""Vendor-specific converters and exporter factories."""

from .jaeger import jaeger
from .zipkin import ZipkinSpanConverter, ZipkinV1SpanConverter, converter_for_path, zipkin

__all__ = [
    "ZipkinSpanConverter",
    "ZipkinV1SpanConverter",
    "converter_for_path",
    "jaeger",
    "zipkin",
]
