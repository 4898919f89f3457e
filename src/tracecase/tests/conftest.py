"""Shared fixtures: log capture, span factories, fake collector."""

from __future__ import annotations

from dataclasses import dataclass, field

import httpx
import pytest

from tracecase.foundation.config import clear_settings_cache
from tracecase.runtime.observability.logging import LogEntry, configure_logging
from tracecase.runtime.observability.tracing import Span, SpanContext, SpanKind

ENDPOINT = "http://collector:9411/api/v2/spans"


@dataclass
class ListRenderer:
    """Renderer that keeps entries for assertions."""

    entries: list[LogEntry] = field(default_factory=list)

    def render(self, entry: LogEntry) -> None:
        self.entries.append(entry)

    def events(self, level: str | None = None) -> list[str]:
        return [e.event for e in self.entries if level is None or e.level == level]


@pytest.fixture(autouse=True)
def logs() -> object:
    """Capture structured logs for every test."""
    renderer = ListRenderer()
    configure_logging(renderer=renderer, level="DEBUG")
    yield renderer
    configure_logging("none")


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> object:
    """Isolate settings from the developer's environment."""
    import os
    for key in [k for k in os.environ if k.startswith("TRACECASE_")]:
        monkeypatch.delenv(key)
    clear_settings_cache()
    yield
    clear_settings_cache()


def make_span(name: str = "op", *, start: float = 1_000.0, end: float | None = 1_000.25,
              kind: SpanKind = SpanKind.INTERNAL, parent: SpanContext | None = None) -> Span:
    """Span with deterministic timing; ended unless end is None."""
    span = Span(name, SpanContext.generate(), parent, kind, start_time=start)
    if end is not None:
        span.end(timestamp=end)
    return span


@pytest.fixture
def ended_spans() -> list[Span]:
    return [make_span("first"), make_span("second", start=1_001.0, end=1_001.5)]


class FakeCollector:
    """httpx handler recording requests; responds with a fixed status or raises."""

    def __init__(self, status: int = 202, raises: type[httpx.HTTPError] | None = None) -> None:
        self.status = status
        self.raises = raises
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raises is not None:
            raise self.raises("collector unavailable", request=request)  # type: ignore[call-arg]
        return httpx.Response(self.status, json={"ok": self.status < 300})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def collector() -> FakeCollector:
    return FakeCollector()
