"""Span identity.

A SpanContext is the portable, immutable identity of a span: trace id,
span id, trace flags and whether it arrived from another process.
"""

from __future__ import annotations

import dataclasses
import secrets
from dataclasses import dataclass
from enum import IntFlag

_INVALID_TRACE_ID = bytes(16)
_INVALID_SPAN_ID = bytes(8)


class TraceFlags(IntFlag):
    """Trace-level options carried with the context."""

    DEFAULT = 0x00
    SAMPLED = 0x01


def _random_span_id() -> bytes:
    while (span_id := secrets.token_bytes(8)) == _INVALID_SPAN_ID:
        pass
    return span_id


def _random_trace_id() -> bytes:
    while (trace_id := secrets.token_bytes(16)) == _INVALID_TRACE_ID:
        pass
    return trace_id


@dataclass(frozen=True, slots=True)
class SpanContext:
    """Immutable span identity, compared by value.

    Attributes:
        trace_id: 16-byte trace identifier
        span_id: 8-byte span identifier
        trace_flags: Trace flags bitset (at minimum SAMPLED)
        is_remote: True iff deserialized from a propagated header

    Example:
        >>> ctx = SpanContext.generate()
        >>> child = ctx.child()
        >>> child.trace_id == ctx.trace_id and child.span_id != ctx.span_id
        True
    """

    trace_id: bytes
    span_id: bytes
    trace_flags: TraceFlags = TraceFlags.SAMPLED
    is_remote: bool = False

    @classmethod
    def generate(cls, *, sampled: bool = True) -> SpanContext:
        """New root identity with random ids."""
        flags = TraceFlags.SAMPLED if sampled else TraceFlags.DEFAULT
        return cls(trace_id=_random_trace_id(), span_id=_random_span_id(), trace_flags=flags)

    def child(self) -> SpanContext:
        """Identity for a local child span: same trace and flags, new span id."""
        return SpanContext(trace_id=self.trace_id, span_id=_random_span_id(), trace_flags=self.trace_flags)

    def copy(self) -> SpanContext:
        """Value-equal, independent instance."""
        return dataclasses.replace(self)

    @property
    def trace_id_hex(self) -> str:
        return self.trace_id.hex()

    @property
    def span_id_hex(self) -> str:
        return self.span_id.hex()

    @property
    def is_sampled(self) -> bool:
        return bool(self.trace_flags & TraceFlags.SAMPLED)

    @property
    def is_valid(self) -> bool:
        """Both ids present and non-zero."""
        return (len(self.trace_id) == 16 and self.trace_id != _INVALID_TRACE_ID
                and len(self.span_id) == 8 and self.span_id != _INVALID_SPAN_ID)
