"""Span exporters for different observability backends.

Provides the export contract and local export destinations:
- ConsoleExporter: Pretty-printed spans for development
- JsonExporter: JSON lines for log aggregation
- InMemoryExporter: Keeps exported spans for inspection and tests
- NoOpExporter: Silent export

Network exporters live in ``tracecase.runtime.observability.exporters``.
"""

from __future__ import annotations

import sys
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, TextIO, runtime_checkable

import orjson

from .logging import get_logger

if TYPE_CHECKING:
    from .exporters.converter import SpanConverter
    from .tracing import Span

# Color constants for ConsoleExporter
_SPAN_COLORS = {"reset": "\033[0m", "bold": "\033[1m", "dim": "\033[2m",
                "red": "\033[31m", "green": "\033[32m", "yellow": "\033[33m", "cyan": "\033[36m"}
_SPAN_NO_COLORS = {k: "" for k in _SPAN_COLORS}

log = get_logger("tracecase.exporter")


class ExportResult(StrEnum):
    """Outcome of a single export attempt."""

    SUCCESS = "success"
    FAILED_NOT_RETRYABLE = "failed_not_retryable"
    FAILED_RETRYABLE = "failed_retryable"

    @property
    def is_success(self) -> bool:
        return self is ExportResult.SUCCESS

    @property
    def is_retryable(self) -> bool:
        """Whether the caller's batching layer may resubmit the batch."""
        return self is ExportResult.FAILED_RETRYABLE


@runtime_checkable
class Exporter(Protocol):
    """Protocol for span exporters.

    Exporters receive ended spans and send them to backends. An export call
    makes one best-effort delivery attempt, never raises, and never retains
    the spans after returning. Each call is independent so exports may run
    concurrently.
    """

    def export(self, spans: Sequence[Span]) -> ExportResult:
        """Export batch of ended spans."""
        ...

    def shutdown(self) -> None:
        """Release resources. Idempotent; later exports fail fast."""
        ...


def _after_shutdown(exporter: object) -> ExportResult:
    log.warning("export after shutdown", exporter=type(exporter).__name__)
    return ExportResult.FAILED_NOT_RETRYABLE


@dataclass(slots=True)
class NoOpExporter:
    """Silent exporter for disabled tracing."""

    _shutdown: bool = field(default=False, init=False, repr=False)

    def export(self, spans: Sequence[Span]) -> ExportResult:
        return _after_shutdown(self) if self._shutdown else ExportResult.SUCCESS

    def shutdown(self) -> None:
        self._shutdown = True


@dataclass(slots=True)
class InMemoryExporter:
    """Collects exported spans in memory.

    Unlike other exporters it keeps references to the spans it receives,
    which is the point of it: intended for tests and local inspection only.

    Example:
        >>> exporter = InMemoryExporter()
        >>> tracer = Tracer(exporter=exporter)
        >>> with tracer.span("work"):
        ...     pass
        >>> [s.name for s in exporter.spans]
        ['work']
    """

    _spans: list[Span] = field(default_factory=list, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)
    _shutdown: bool = field(default=False, init=False, repr=False)

    @property
    def spans(self) -> tuple[Span, ...]:
        with self._lock:
            return tuple(self._spans)

    def clear(self) -> None:
        with self._lock:
            self._spans.clear()

    def export(self, spans: Sequence[Span]) -> ExportResult:
        if self._shutdown:
            return _after_shutdown(self)
        with self._lock:
            self._spans.extend(spans)
        return ExportResult.SUCCESS

    def shutdown(self) -> None:
        self._shutdown = True


@dataclass(slots=True)
class ConsoleExporter:
    """Pretty-print spans to console for development.

    Args: output (stderr), colors (True if TTY), verbose (False)
    """

    output: TextIO = field(default_factory=lambda: sys.stderr)
    colors: bool = field(default=True)
    verbose: bool = False
    _shutdown: bool = field(default=False, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.colors and (self.output.closed or not getattr(self.output, "isatty", lambda: False)()):
            self.colors = False

    def export(self, spans: Sequence[Span]) -> ExportResult:
        if self._shutdown:
            return _after_shutdown(self)
        try:
            for s in spans:
                self._print_span(s)
        except OSError as e:
            log.warning("console export failed", error=str(e))
            return ExportResult.FAILED_RETRYABLE
        except ValueError as e:
            # closed stream
            log.warning("console export failed", error=str(e))
            return ExportResult.FAILED_NOT_RETRYABLE
        return ExportResult.SUCCESS

    def _print_span(self, span: Span) -> None:
        c = _SPAN_COLORS if self.colors else _SPAN_NO_COLORS
        ok = span.status.is_ok
        status_sym, status_color = ("✓", c["green"]) if ok else ("✗", c["red"])
        ts = datetime.fromtimestamp(span.start_time, tz=UTC).strftime("%H:%M:%S.%f")[:-3]
        dur = f"{span.duration_ms:.1f}ms" if span.duration_ms is not None else "..."
        indent = "  " if span.parent else ""

        line = (f"{c['dim']}{ts}{c['reset']} "
                f"{status_color}{status_sym}{c['reset']} "
                f"{indent}{c['bold']}{span.name}{c['reset']} "
                f"{c['cyan']}[{span.kind.value}]{c['reset']} "
                f"{c['yellow']}{dur}{c['reset']} "
                f"{c['dim']}trace={span.context.trace_id_hex}{c['reset']}")

        if not ok:
            line += f" {c['red']}{span.status.code.value}"
            if span.status.description:
                line += f"={span.status.description[:50]}"
            line += c["reset"]

        print(line, file=self.output)

        # Verbose: attributes and events
        if self.verbose:
            for k, v in span.attributes.items():
                print(f"    {c['dim']}{k}={v!r}{c['reset']}", file=self.output)
            for e in span.events:
                print(f"    {c['dim']}@{e.name} {dict(e.attributes)!r}{c['reset']}", file=self.output)

    def shutdown(self) -> None:
        if not self._shutdown:
            self._shutdown = True
            if not self.output.closed:
                self.output.flush()


@dataclass(slots=True)
class JsonExporter:
    """Export spans as JSON lines for log aggregation.

    Each span is a single JSON object per line (JSONL format), built by the
    converter (``Span.to_dict`` by default).
    """

    output: TextIO = field(default_factory=lambda: sys.stdout)
    converter: SpanConverter | None = None
    _shutdown: bool = field(default=False, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.converter is None:
            from .exporters.converter import DefaultSpanConverter
            self.converter = DefaultSpanConverter()

    def export(self, spans: Sequence[Span]) -> ExportResult:
        if self._shutdown:
            return _after_shutdown(self)
        try:
            lines = [orjson.dumps(self.converter.convert(s)).decode() for s in spans]  # type: ignore[union-attr]
        except (TypeError, ValueError) as e:
            log.warning("json export failed", stage="serialize", error=str(e))
            return ExportResult.FAILED_NOT_RETRYABLE
        try:
            for line in lines:
                print(line, file=self.output)
        except OSError as e:
            log.warning("json export failed", stage="write", error=str(e))
            return ExportResult.FAILED_RETRYABLE
        except ValueError as e:
            log.warning("json export failed", stage="write", error=str(e))
            return ExportResult.FAILED_NOT_RETRYABLE
        return ExportResult.SUCCESS

    def shutdown(self) -> None:
        if not self._shutdown:
            self._shutdown = True
            if not self.output.closed:
                self.output.flush()
