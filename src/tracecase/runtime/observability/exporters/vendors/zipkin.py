"""Zipkin JSON converters (v1 and v2 API) and exporter factory."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import orjson

from tracecase.foundation.errors import AttributeValue, JsonDict

from ...tracing import SpanKind
from ..http import HttpExporter

if TYPE_CHECKING:
    from ...tracing import Span

ZIPKIN_V1_PATH = "/api/v1/spans"
ZIPKIN_V2_PATH = "/api/v2/spans"

_V2_KINDS = {
    SpanKind.CLIENT: "CLIENT",
    SpanKind.SERVER: "SERVER",
    SpanKind.PRODUCER: "PRODUCER",
    SpanKind.CONSUMER: "CONSUMER",
}
# v1 has no kind field; it is expressed as core annotations at start and end
_V1_MARKERS = {
    SpanKind.CLIENT: ("cs", "cr"),
    SpanKind.SERVER: ("sr", "ss"),
    SpanKind.PRODUCER: ("ms", None),
    SpanKind.CONSUMER: (None, "mr"),
}


def _micros(seconds: float) -> int:
    return int(round(seconds * 1_000_000))


def _tag_value(value: AttributeValue) -> str:
    """Zipkin tags are strings."""
    match value:
        case bool(): return "true" if value else "false"
        case str(): return value
        case int() | float(): return str(value)
        case _: return orjson.dumps(list(value)).decode()


def _tags(span: Span) -> dict[str, str]:
    tags = {k: _tag_value(v) for k, v in span.attributes.items()}
    if not span.status.is_ok:
        tags["otel.status_code"] = "ERROR"
        tags["error"] = span.status.description or span.status.code.value
    return tags


def _annotation_value(name: str, attributes: dict[str, AttributeValue]) -> str:
    if not attributes:
        return name
    return orjson.dumps({name: {k: list(v) if isinstance(v, tuple) else v
                                for k, v in attributes.items()}}).decode()


@dataclass(slots=True)
class ZipkinSpanConverter:
    """Convert spans to Zipkin v2 JSON.

    Compatible with Zipkin, Jaeger (Zipkin collector), and other
    systems supporting Zipkin v2 format.
    """

    service_name: str = "tracecase"

    def convert(self, span: Span) -> JsonDict:
        ctx, parent = span.context, span.parent
        zipkin_span: JsonDict = {
            "traceId": ctx.trace_id_hex,
            "id": ctx.span_id_hex,
            "name": span.name,
            "timestamp": _micros(span.start_time),
            "duration": _micros(span.duration or 0.0),
            "localEndpoint": {"serviceName": self.service_name},
            "tags": _tags(span),
        }
        if parent is not None:
            zipkin_span["parentId"] = parent.span_id_hex
        if kind := _V2_KINDS.get(span.kind):
            zipkin_span["kind"] = kind
        if span.kind is SpanKind.SERVER and parent is not None and parent.is_remote:
            zipkin_span["shared"] = True
        if events := span.events:
            zipkin_span["annotations"] = [
                {"timestamp": _micros(e.timestamp), "value": _annotation_value(e.name, dict(e.attributes))}
                for e in events
            ]
        return zipkin_span


@dataclass(slots=True)
class ZipkinV1SpanConverter:
    """Convert spans to the legacy Zipkin v1 JSON model."""

    service_name: str = "tracecase"

    def convert(self, span: Span) -> JsonDict:
        ctx, parent = span.context, span.parent
        endpoint = {"serviceName": self.service_name}
        start, end = span.start_time, span.end_time if span.end_time is not None else span.start_time

        annotations: list[JsonDict] = []
        first, last = _V1_MARKERS.get(span.kind, (None, None))
        if first:
            annotations.append({"timestamp": _micros(start), "value": first, "endpoint": endpoint})
        annotations += [
            {"timestamp": _micros(e.timestamp), "value": _annotation_value(e.name, dict(e.attributes)),
             "endpoint": endpoint}
            for e in span.events
        ]
        if last:
            annotations.append({"timestamp": _micros(end), "value": last, "endpoint": endpoint})

        v1_span: JsonDict = {
            "traceId": ctx.trace_id_hex,
            "id": ctx.span_id_hex,
            "name": span.name,
            "timestamp": _micros(start),
            "duration": _micros(end - start),
            "annotations": annotations,
            "binaryAnnotations": [
                {"key": k, "value": v, "endpoint": endpoint} for k, v in _tags(span).items()
            ],
        }
        if parent is not None:
            v1_span["parentId"] = parent.span_id_hex
        return v1_span


def converter_for_path(path: str, service_name: str) -> ZipkinSpanConverter | ZipkinV1SpanConverter:
    """Pick the Zipkin model matching a collector API path."""
    if path == ZIPKIN_V1_PATH:
        return ZipkinV1SpanConverter(service_name=service_name)
    return ZipkinSpanConverter(service_name=service_name)


def zipkin(endpoint: str = "http://localhost:9411/api/v2/spans", *, service_name: str = "tracecase",
           timeout: float = 2.0) -> HttpExporter:
    """Create Zipkin exporter with sensible defaults."""
    return HttpExporter(endpoint, service_name=service_name, timeout=timeout)
