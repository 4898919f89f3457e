"""Span types for tracing.

Spans represent units of work with timing, attributes, and events.
A span is mutable while recording and frozen once ended.
"""

from __future__ import annotations

import math
import threading
import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType

from tracecase.foundation.errors import (
    AlreadyEndedError,
    AttributeValue,
    InvalidTimestampError,
    JsonDict,
    NotRecordingError,
)

from .attributes import validate_attribute, validate_attributes
from .context import SpanContext


class SpanKind(StrEnum):
    """Span type classification."""

    UNSPECIFIED = "unspecified"
    INTERNAL = "internal"
    SERVER = "server"
    CLIENT = "client"
    PRODUCER = "producer"
    CONSUMER = "consumer"


class StatusCode(StrEnum):
    """Span completion status codes."""

    OK = "ok"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"
    INVALID_ARGUMENT = "invalid_argument"
    DEADLINE_EXCEEDED = "deadline_exceeded"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    UNAVAILABLE = "unavailable"
    INTERNAL = "internal"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Status:
    """Completion status of a span."""

    code: StatusCode = StatusCode.OK
    description: str | None = None

    @property
    def is_ok(self) -> bool:
        return self.code is StatusCode.OK


def _frozen(attributes: Mapping[str, object] | None) -> Mapping[str, AttributeValue]:
    return MappingProxyType(validate_attributes(attributes))


@dataclass(frozen=True, slots=True)
class Event:
    """Point-in-time event within a span.

    Captures significant moments during execution (e.g., "cache_miss", "retry").
    """

    name: str
    timestamp: float = field(default_factory=time.time)
    attributes: Mapping[str, AttributeValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", _frozen(self.attributes))

    def __hash__(self) -> int:
        return hash((self.name, self.timestamp, frozenset(self.attributes.items())))


@dataclass(frozen=True, slots=True)
class Link:
    """Reference from a span to another span's identity."""

    context: SpanContext
    attributes: Mapping[str, AttributeValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", _frozen(self.attributes))

    def __hash__(self) -> int:
        return hash((self.context, frozenset(self.attributes.items())))


class Span:
    """Represents a unit of work in a trace.

    Recording until end() is called; every mutator checks that state under
    the span's lock and raises NotRecordingError once ended. Accessors return
    copies so callers never hold the span's internal containers.

    Attributes:
        name: Human-readable span name (e.g., "GET /users")
        context: SpanContext with trace/span IDs (returned as a copy)
        parent: Parent SpanContext or None (returned as a copy)
        kind: Type of work (server, client, internal, ...)
        start_time: Unix timestamp of span start
        end_time: Unix timestamp of span end (None while recording)
        status: Completion status, OK unless ended otherwise
        attributes: Key-value metadata
        events: Timestamped events in append order
        links: Links given at construction

    Example:
        >>> span = Span("search", SpanContext.generate(), kind=SpanKind.CLIENT)
        >>> span.set_attribute("query", "python tutorial")
        >>> span.add_event("cache_miss")
        >>> span.end()
    """

    __slots__ = ("_name", "_context", "_parent", "_kind", "_links", "_start_time", "_end_time",
                 "_status", "_attributes", "_events", "_lock")

    def __init__(
        self,
        name: str,
        context: SpanContext,
        parent: SpanContext | None = None,
        kind: SpanKind = SpanKind.INTERNAL,
        links: Iterable[Link] = (),
        *,
        attributes: Mapping[str, object] | None = None,
        start_time: float | None = None,
    ) -> None:
        self._name = name
        self._context = context
        self._parent = parent
        self._kind = kind
        self._links: tuple[Link, ...] = tuple(links)
        if start_time is not None and not math.isfinite(start_time):
            raise InvalidTimestampError(f"Start time of span {name!r} must be finite, got {start_time}")
        self._start_time = time.time() if start_time is None else start_time
        self._end_time: float | None = None
        self._status = Status()
        self._attributes: dict[str, AttributeValue] = validate_attributes(attributes)
        self._events: list[Event] = []
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        state = "recording" if self.is_recording else f"ended status={self._status.code.value}"
        return f"Span(name={self._name!r}, span_id={self._context.span_id_hex}, {state})"

    def _check_recording(self, action: str) -> None:
        """Caller holds the lock."""
        if self._end_time is not None:
            raise NotRecordingError(f"Cannot {action}: span {self._name!r} has ended")

    # ─────────────────────────────────────────────────────────────────────
    # Identity & timing
    # ─────────────────────────────────────────────────────────────────────

    @property
    def context(self) -> SpanContext:
        return self._context.copy()

    @property
    def parent(self) -> SpanContext | None:
        return self._parent.copy() if self._parent is not None else None

    @property
    def kind(self) -> SpanKind:
        return self._kind

    @property
    def links(self) -> tuple[Link, ...]:
        return self._links

    @property
    def start_time(self) -> float:
        return self._start_time

    @property
    def end_time(self) -> float | None:
        return self._end_time

    @property
    def is_recording(self) -> bool:
        """Whether the span can still be mutated."""
        return self._end_time is None

    @property
    def duration(self) -> float | None:
        """Duration in seconds, or None if not ended."""
        with self._lock:
            if self._end_time is None:
                return None
            return self._end_time - self._start_time

    @property
    def duration_ms(self) -> float | None:
        """Duration in milliseconds, or None if not ended."""
        d = self.duration
        return None if d is None else d * 1000

    @property
    def status(self) -> Status:
        return self._status

    # ─────────────────────────────────────────────────────────────────────
    # Name
    # ─────────────────────────────────────────────────────────────────────

    @property
    def name(self) -> str:
        return self._name

    def update_name(self, name: str) -> Span:
        """Rename the span while recording."""
        with self._lock:
            self._check_recording("update name")
            self._name = name
        return self

    # ─────────────────────────────────────────────────────────────────────
    # Attributes & events
    # ─────────────────────────────────────────────────────────────────────

    @property
    def attributes(self) -> dict[str, AttributeValue]:
        with self._lock:
            return dict(self._attributes)

    def get_attribute(self, key: str) -> AttributeValue | None:
        with self._lock:
            return self._attributes.get(key)

    def set_attribute(self, key: str, value: AttributeValue) -> Span:
        """Set attribute (last write wins), returns self for chaining."""
        with self._lock:
            self._check_recording("set attribute")
            self._attributes[key] = validate_attribute(key, value)
        return self

    def set_attributes(self, attrs: Mapping[str, AttributeValue]) -> Span:
        """Replace all attributes. Everything is validated before the map changes."""
        with self._lock:
            self._check_recording("set attributes")
            self._attributes = validate_attributes(attrs)
        return self

    @property
    def events(self) -> tuple[Event, ...]:
        with self._lock:
            return tuple(self._events)

    def add_event(
        self,
        name: str,
        attributes: Mapping[str, AttributeValue] | None = None,
        timestamp: float | None = None,
    ) -> Event:
        """Append a timestamped event and return it."""
        with self._lock:
            self._check_recording("add event")
            if timestamp is not None and not math.isfinite(timestamp):
                raise InvalidTimestampError(f"Event {name!r} timestamp must be finite, got {timestamp}")
            event = Event(name=name, timestamp=time.time() if timestamp is None else timestamp,
                          attributes=attributes or {})
            self._events.append(event)
        return event

    # ─────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────────

    def end(
        self,
        status_code: StatusCode = StatusCode.OK,
        description: str | None = None,
        timestamp: float | None = None,
    ) -> Span:
        """End the span with a status.

        Args:
            status_code: Completion status code
            description: Optional status description
            timestamp: Explicit end time (defaults to now)

        Raises:
            AlreadyEndedError: The span was already ended
            InvalidTimestampError: timestamp is not finite or is earlier than start_time
        """
        with self._lock:
            if self._end_time is not None:
                raise AlreadyEndedError(f"Span {self._name!r} has already ended")
            end_time = time.time() if timestamp is None else timestamp
            if not math.isfinite(end_time):
                raise InvalidTimestampError(f"End time of span {self._name!r} must be finite, got {end_time}")
            if end_time < self._start_time:
                raise InvalidTimestampError(
                    f"End time {end_time} is earlier than start time {self._start_time} of span {self._name!r}")
            self._status = Status(StatusCode(status_code), description)
            self._end_time = end_time
        return self

    def to_dict(self) -> JsonDict:
        """Serialize span for export."""
        ctx, parent = self._context, self._parent
        with self._lock:
            return {
                "name": self._name,
                "trace_id": ctx.trace_id_hex,
                "span_id": ctx.span_id_hex,
                "parent_id": parent.span_id_hex if parent else None,
                "trace_flags": int(ctx.trace_flags),
                "remote_parent": parent.is_remote if parent else False,
                "kind": self._kind.value,
                "start_time": self._start_time,
                "end_time": self._end_time,
                "duration_ms": None if self._end_time is None else (self._end_time - self._start_time) * 1000,
                "status": {"code": self._status.code.value, "description": self._status.description},
                "attributes": {k: list(v) if isinstance(v, tuple) else v for k, v in self._attributes.items()},
                "events": [
                    {"name": e.name, "timestamp": e.timestamp,
                     "attributes": {k: list(v) if isinstance(v, tuple) else v for k, v in e.attributes.items()}}
                    for e in self._events
                ],
                "links": [
                    {"trace_id": link.context.trace_id_hex, "span_id": link.context.span_id_hex,
                     "attributes": dict(link.attributes)}
                    for link in self._links
                ],
            }
