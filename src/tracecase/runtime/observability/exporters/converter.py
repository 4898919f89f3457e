"""Span converters: turn ended spans into backend-specific records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from tracecase.foundation.errors import JsonDict

if TYPE_CHECKING:
    from ..tracing import Span


@runtime_checkable
class SpanConverter(Protocol):
    """Builds one wire record per span using only the span's public accessors."""

    def convert(self, span: Span) -> JsonDict: ...


class DefaultSpanConverter:
    """Plain JSON record, as produced by ``Span.to_dict``."""

    def convert(self, span: Span) -> JsonDict:
        return span.to_dict()
