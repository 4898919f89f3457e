"""Tests for Tracer span creation and the global tracer helpers."""

from __future__ import annotations

import asyncio

import orjson
import pytest

from conftest import FakeCollector
from tracecase.foundation.config import TracecaseSettings
from tracecase.foundation.errors import ConfigurationError
from tracecase.runtime.observability import (
    ConsoleExporter,
    ExportResult,
    HttpExporter,
    InMemoryExporter,
    NoOpExporter,
    configure_tracing,
    get_logger,
    get_tracer,
)
from tracecase.runtime.observability.tracing import SpanContext, SpanKind, StatusCode, Tracer


@pytest.fixture
def memory() -> InMemoryExporter:
    return InMemoryExporter()


@pytest.fixture
def tracer(memory: InMemoryExporter) -> Tracer:
    return Tracer(exporter=memory, service_name="checkout")


@pytest.fixture(autouse=True)
def reset_global_tracer() -> object:
    yield
    configure_tracing("none")


# ═════════════════════════════════════════════════════════════════════════════
# Span creation
# ═════════════════════════════════════════════════════════════════════════════


def test_root_span(tracer: Tracer) -> None:
    span = tracer.start_span("root", kind=SpanKind.SERVER, attributes={"http.method": "GET"})

    assert span.is_recording
    assert span.parent is None
    assert span.kind is SpanKind.SERVER
    assert span.attributes == {"service.name": "checkout", "http.method": "GET"}


def test_child_of_span(tracer: Tracer) -> None:
    parent = tracer.start_span("parent")

    child = tracer.start_span("child", parent=parent)

    assert child.context.trace_id == parent.context.trace_id
    assert child.context.span_id != parent.context.span_id
    assert child.parent == parent.context


def test_child_of_remote_context(tracer: Tracer) -> None:
    remote = SpanContext(bytes(range(1, 17)), bytes(range(1, 9)), is_remote=True)

    child = tracer.start_span("handle", parent=remote, kind=SpanKind.SERVER)

    assert child.parent == remote
    assert child.parent.is_remote
    assert not child.context.is_remote


# ═════════════════════════════════════════════════════════════════════════════
# Ending and exporting
# ═════════════════════════════════════════════════════════════════════════════


def test_end_span_exports_single_span(tracer: Tracer, memory: InMemoryExporter) -> None:
    span = tracer.start_span("work")

    result = tracer.end_span(span, StatusCode.CANCELLED, "client went away")

    assert result is ExportResult.SUCCESS
    assert memory.spans == (span,)
    assert span.status.code is StatusCode.CANCELLED


def test_failed_export_logged(logs) -> None:
    exporter = HttpExporter("http://collector:9411/api/v2/spans",
                            transport=FakeCollector(status=503).transport)
    tracer = Tracer(exporter=exporter)
    span = tracer.start_span("work")

    assert tracer.end_span(span) is ExportResult.FAILED_RETRYABLE

    entry = next(e for e in logs.entries if e.event == "span export failed")
    assert entry.context["span_id"] == span.context.span_id_hex
    assert entry.context["result"] == "failed_retryable"


def test_context_manager_ok(tracer: Tracer, memory: InMemoryExporter) -> None:
    with tracer.span("work") as span:
        span.set_attribute("items", 3)

    assert not span.is_recording
    assert span.status.is_ok
    assert memory.spans == (span,)


def test_context_manager_records_exception(tracer: Tracer, memory: InMemoryExporter) -> None:
    with pytest.raises(KeyError), tracer.span("lookup") as span:
        raise KeyError("user:1")

    assert span.status.code is StatusCode.ERROR
    assert span.status.description == "'user:1'"
    event = span.events[-1]
    assert event.name == "exception"
    assert event.attributes["exception.type"] == "KeyError"
    assert memory.spans == (span,)


def test_context_manager_respects_explicit_end(tracer: Tracer, memory: InMemoryExporter) -> None:
    with tracer.span("work") as span:
        span.end(StatusCode.NOT_FOUND)

    assert span.status.code is StatusCode.NOT_FOUND
    assert memory.spans == ()


def test_async_context_manager(tracer: Tracer, memory: InMemoryExporter) -> None:
    async def run() -> None:
        async with tracer.span("async_work") as span:
            span.add_event("tick")

    asyncio.run(run())

    assert [s.name for s in memory.spans] == ["async_work"]


def test_shutdown_delegates(tracer: Tracer, memory: InMemoryExporter) -> None:
    tracer.shutdown()
    assert memory.export([]) is ExportResult.FAILED_NOT_RETRYABLE


# ═════════════════════════════════════════════════════════════════════════════
# Global tracer
# ═════════════════════════════════════════════════════════════════════════════


def test_get_tracer_defaults_to_noop() -> None:
    configure_tracing("none")
    assert isinstance(get_tracer().exporter, NoOpExporter)


def test_configure_tracing_with_instance(memory: InMemoryExporter) -> None:
    tracer = configure_tracing(memory, service_name="api")

    assert get_tracer() is tracer
    assert tracer.exporter is memory
    assert tracer.service_name == "api"


def test_configure_tracing_shuts_down_previous(memory: InMemoryExporter) -> None:
    configure_tracing(memory)
    configure_tracing("console")

    assert isinstance(get_tracer().exporter, ConsoleExporter)
    assert memory.export([]) is ExportResult.FAILED_NOT_RETRYABLE


def test_configure_tracing_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TRACECASE_EXPORTER_KIND", "http")
    monkeypatch.setenv("TRACECASE_EXPORTER_ENDPOINT", "http://zipkin:9411/api/v2/spans")
    monkeypatch.setenv("TRACECASE_EXPORTER_SERVICE_NAME", "billing")

    tracer = configure_tracing(settings=TracecaseSettings())

    assert isinstance(tracer.exporter, HttpExporter)
    assert tracer.exporter.endpoint == "http://zipkin:9411/api/v2/spans"
    assert tracer.service_name == "billing"


def test_configure_tracing_unknown_kind() -> None:
    with pytest.raises(ConfigurationError):
        configure_tracing("carrier-pigeon")


def test_configure_tracing_applies_logging_settings(monkeypatch: pytest.MonkeyPatch,
                                                   capsys: pytest.CaptureFixture[str]) -> None:
    """TRACECASE_LOG_LEVEL=ERROR filters warnings once tracing is configured."""
    monkeypatch.setenv("TRACECASE_LOG_LEVEL", "ERROR")
    monkeypatch.setenv("TRACECASE_LOG_FORMAT", "json")

    configure_tracing("none", settings=TracecaseSettings())
    log = get_logger("tracecase.test")
    log.warning("filtered")
    log.error("kept")

    events = [orjson.loads(line)["event"] for line in capsys.readouterr().out.splitlines()]
    assert events == ["kept"]
