"""Tracer for creating and ending spans.

Provides the main API for instrumenting code with traces.
Uses context managers for automatic span lifecycle management; each ended
span is handed to the exporter as a one-span batch.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tracecase.foundation.errors import AttributeValue, ConfigurationError

from ..exporter import ConsoleExporter, Exporter, ExportResult, JsonExporter, NoOpExporter
from ..logging import configure_logging, get_logger
from .context import SpanContext
from .span import Link, Span, SpanKind, StatusCode

if TYPE_CHECKING:
    from types import TracebackType

    from tracecase.foundation.config import TracecaseSettings

log = get_logger("tracecase.tracer")


@dataclass(slots=True)
class Tracer:
    """Creates spans and exports them once ended.

    Usage:
        >>> tracer = Tracer(exporter=ConsoleExporter(), service_name="my-service")
        >>> with tracer.span("load_user", kind=SpanKind.CLIENT) as span:
        ...     span.set_attribute("user.id", 42)

    Args:
        exporter: Where to send ended spans
        service_name: Name identifying this service, recorded as ``service.name``
    """

    exporter: Exporter = field(default_factory=NoOpExporter)
    service_name: str = "tracecase"

    def start_span(
        self,
        name: str,
        *,
        parent: SpanContext | Span | None = None,
        kind: SpanKind = SpanKind.INTERNAL,
        links: Iterable[Link] = (),
        attributes: Mapping[str, AttributeValue] | None = None,
    ) -> Span:
        """Start a span manually (caller must end it). Prefer `span()` for automatic lifecycle."""
        parent_ctx = parent.context if isinstance(parent, Span) else parent
        ctx = parent_ctx.child() if parent_ctx is not None else SpanContext.generate()
        return Span(name, ctx, parent_ctx, kind, links,
                    attributes={"service.name": self.service_name, **(attributes or {})})

    def end_span(
        self,
        span: Span,
        status_code: StatusCode = StatusCode.OK,
        description: str | None = None,
    ) -> ExportResult:
        """End a span and export it."""
        span.end(status_code, description)
        result = self.exporter.export([span])
        if not result.is_success:
            log.bind_span(span).warning("span export failed", result=result.value)
        return result

    def span(
        self,
        name: str,
        *,
        parent: SpanContext | Span | None = None,
        kind: SpanKind = SpanKind.INTERNAL,
        links: Iterable[Link] = (),
        attributes: Mapping[str, AttributeValue] | None = None,
    ) -> SpanContextManager:
        """Create a span context manager.

        Example:
            >>> with tracer.span("fetch", kind=SpanKind.CLIENT) as span:
            ...     span.set_attribute("http.url", "https://api.example.com")
        """
        return SpanContextManager(self, self.start_span(name, parent=parent, kind=kind, links=links,
                                                        attributes=attributes))

    def shutdown(self) -> None:
        """Shutdown tracer and its exporter."""
        self.exporter.shutdown()


@dataclass(slots=True)
class SpanContextManager:
    """Context manager for span lifecycle. Ends the span on exit, with ERROR status if the block raised."""

    tracer: Tracer
    _span: Span

    def __enter__(self) -> Span:
        return self._span

    def __exit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None,
                 exc_tb: TracebackType | None) -> None:
        span = self._span
        if not span.is_recording:
            return  # ended explicitly inside the block
        if exc_val is None:
            self.tracer.end_span(span)
            return
        span.add_event("exception", {"exception.type": type(exc_val).__name__,
                                     "exception.message": str(exc_val)})
        self.tracer.end_span(span, StatusCode.ERROR, str(exc_val) or type(exc_val).__name__)

    async def __aenter__(self) -> Span:
        return self.__enter__()

    async def __aexit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None,
                        exc_tb: TracebackType | None) -> None:
        self.__exit__(exc_type, exc_val, exc_tb)


# ─────────────────────────────────────────────────────────────────────────────
# Convenience Functions
# ─────────────────────────────────────────────────────────────────────────────

_global_lock = threading.Lock()
_global_tracer: Tracer | None = None


def get_tracer() -> Tracer:
    """Get the global tracer (a no-op exporting one if not configured)."""
    global _global_tracer
    with _global_lock:
        if _global_tracer is None:
            _global_tracer = Tracer()
        return _global_tracer


def configure_tracing(
    exporter: str | Exporter | None = None,
    *,
    settings: TracecaseSettings | None = None,
    service_name: str | None = None,
) -> Tracer:
    """Configure the global tracer and structured logging from settings.

    Args:
        exporter: "http", "console", "json", "none", or an Exporter instance.
            Defaults to ``settings.exporter.kind``.
        settings: Settings to read; defaults to ``get_settings()``
        service_name: Overrides ``settings.exporter.service_name``

    Returns:
        Configured global Tracer instance. A previously configured tracer is
        shut down.

    Example:
        >>> configure_tracing("http")  # endpoint/timeout from TRACECASE_EXPORTER_*
    """
    global _global_tracer
    if settings is None:
        from tracecase.foundation.config import get_settings
        settings = get_settings()
    configure_logging(settings=settings)
    name = service_name or settings.exporter.service_name

    if exporter is None or isinstance(exporter, str):
        kind = exporter or settings.exporter.kind
        match kind:
            case "http":
                from ..exporters.http import HttpExporter
                exp: Exporter = HttpExporter.from_settings(settings, service_name=name)
            case "console": exp = ConsoleExporter()
            case "json": exp = JsonExporter()
            case "none": exp = NoOpExporter()
            case _: raise ConfigurationError(f"Unknown exporter: {kind}. Use 'http', 'console', 'json', or 'none'")
    else:
        exp = exporter

    tracer = Tracer(exporter=exp, service_name=name)
    with _global_lock:
        previous, _global_tracer = _global_tracer, tracer
    if previous is not None:
        previous.shutdown()
    log.debug("tracing configured", exporter=type(exp).__name__, service=name)
    return tracer
