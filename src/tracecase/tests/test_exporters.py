"""Tests for local exporters and the export result contract."""

from __future__ import annotations

import io

import orjson
import pytest

from conftest import make_span
from tracecase.runtime.observability import (
    ConsoleExporter,
    DefaultSpanConverter,
    Exporter,
    ExportResult,
    InMemoryExporter,
    JsonExporter,
    NoOpExporter,
)
from tracecase.runtime.observability.tracing import StatusCode


class _BrokenStream(io.StringIO):
    def write(self, s: str) -> int:
        raise OSError("disk full")


# ═════════════════════════════════════════════════════════════════════════════
# ExportResult
# ═════════════════════════════════════════════════════════════════════════════


def test_export_result_flags() -> None:
    assert ExportResult.SUCCESS.is_success
    assert not ExportResult.SUCCESS.is_retryable
    assert ExportResult.FAILED_RETRYABLE.is_retryable
    assert not ExportResult.FAILED_NOT_RETRYABLE.is_retryable
    assert not ExportResult.FAILED_NOT_RETRYABLE.is_success


@pytest.mark.parametrize("exporter", [
    NoOpExporter(), InMemoryExporter(), ConsoleExporter(output=io.StringIO()), JsonExporter(output=io.StringIO()),
], ids=lambda e: type(e).__name__)
def test_local_exporters_satisfy_protocol(exporter: Exporter) -> None:
    assert isinstance(exporter, Exporter)


@pytest.mark.parametrize("factory", [
    NoOpExporter,
    InMemoryExporter,
    lambda: ConsoleExporter(output=io.StringIO()),
    lambda: JsonExporter(output=io.StringIO()),
], ids=["noop", "memory", "console", "json"])
def test_shutdown_idempotent_and_fails_fast(factory) -> None:
    exporter = factory()
    assert exporter.export([make_span()]) is ExportResult.SUCCESS

    exporter.shutdown()
    exporter.shutdown()

    assert exporter.export([make_span()]) is ExportResult.FAILED_NOT_RETRYABLE


# ═════════════════════════════════════════════════════════════════════════════
# InMemoryExporter
# ═════════════════════════════════════════════════════════════════════════════


def test_in_memory_collects_and_clears() -> None:
    exporter = InMemoryExporter()
    spans = [make_span("a"), make_span("b")]

    exporter.export(spans)

    assert [s.name for s in exporter.spans] == ["a", "b"]
    exporter.clear()
    assert exporter.spans == ()


def test_in_memory_copies_batch() -> None:
    exporter = InMemoryExporter()
    batch = [make_span()]
    exporter.export(batch)
    batch.clear()
    assert len(exporter.spans) == 1


# ═════════════════════════════════════════════════════════════════════════════
# ConsoleExporter
# ═════════════════════════════════════════════════════════════════════════════


def test_console_line() -> None:
    out = io.StringIO()
    span = make_span("load_user")

    ConsoleExporter(output=out).export([span])

    line = out.getvalue()
    assert "load_user" in line
    assert "250.0ms" in line
    assert f"trace={span.context.trace_id_hex}" in line
    assert "\033[" not in line


def test_console_error_and_verbose() -> None:
    out = io.StringIO()
    span = make_span(end=None)
    span.set_attribute("user.id", 7)
    span.add_event("cache_miss")
    span.end(StatusCode.UNAVAILABLE, "db down", timestamp=1_000.5)

    ConsoleExporter(output=out, verbose=True).export([span])

    text = out.getvalue()
    assert "unavailable=db down" in text
    assert "user.id=7" in text
    assert "@cache_miss" in text


def test_console_write_failure_retryable() -> None:
    assert ConsoleExporter(output=_BrokenStream()).export([make_span()]) is ExportResult.FAILED_RETRYABLE


# ═════════════════════════════════════════════════════════════════════════════
# JsonExporter
# ═════════════════════════════════════════════════════════════════════════════


def test_json_lines() -> None:
    out = io.StringIO()
    spans = [make_span("a"), make_span("b")]

    assert JsonExporter(output=out).export(spans) is ExportResult.SUCCESS

    lines = out.getvalue().splitlines()
    assert len(lines) == 2
    records = [orjson.loads(line) for line in lines]
    assert [r["name"] for r in records] == ["a", "b"]
    assert records[0]["span_id"] == spans[0].context.span_id_hex


def test_json_default_converter_is_to_dict() -> None:
    span = make_span()
    assert DefaultSpanConverter().convert(span) == span.to_dict()


def test_json_unserializable_not_retryable() -> None:
    class Opaque:
        def convert(self, span):
            return {"blob": object()}

    out = io.StringIO()
    assert JsonExporter(output=out, converter=Opaque()).export([make_span()]) is ExportResult.FAILED_NOT_RETRYABLE
    assert out.getvalue() == ""


def test_json_write_failure_retryable() -> None:
    assert JsonExporter(output=_BrokenStream()).export([make_span()]) is ExportResult.FAILED_RETRYABLE


# ═════════════════════════════════════════════════════════════════════════════
# Closed output streams
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize("factory", [ConsoleExporter, JsonExporter], ids=["console", "json"])
def test_closed_stream_not_retryable(factory, logs) -> None:
    """A closed stream never accepts the write, so the batch is not retried."""
    out = io.StringIO()
    out.close()
    exporter = factory(output=out)

    assert exporter.export([make_span()]) is ExportResult.FAILED_NOT_RETRYABLE
    assert logs.events("warning")

    exporter.shutdown()
