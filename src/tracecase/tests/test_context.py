"""Tests for SpanContext identity."""

from __future__ import annotations

import dataclasses

import pytest

from tracecase.runtime.observability.tracing import SpanContext, TraceFlags


def test_value_equality() -> None:
    a = SpanContext(b"\x01" * 16, b"\x02" * 8)
    b = SpanContext(b"\x01" * 16, b"\x02" * 8)

    assert a == b
    assert hash(a) == hash(b)
    assert a != SpanContext(b"\x01" * 16, b"\x03" * 8)
    assert a != SpanContext(b"\x01" * 16, b"\x02" * 8, is_remote=True)


def test_immutable() -> None:
    ctx = SpanContext.generate()
    with pytest.raises(dataclasses.FrozenInstanceError):
        ctx.span_id = b"\x00" * 8  # type: ignore[misc]


def test_copy_is_equal_and_distinct() -> None:
    ctx = SpanContext.generate()
    copy = ctx.copy()
    assert copy == ctx
    assert copy is not ctx


def test_generate() -> None:
    ctx = SpanContext.generate()

    assert ctx.is_valid
    assert ctx.is_sampled
    assert not ctx.is_remote
    assert len(ctx.trace_id_hex) == 32
    assert len(ctx.span_id_hex) == 16
    assert ctx.trace_id_hex == ctx.trace_id_hex.lower()


def test_generate_unsampled() -> None:
    ctx = SpanContext.generate(sampled=False)
    assert ctx.trace_flags is TraceFlags.DEFAULT
    assert not ctx.is_sampled


def test_child_shares_trace() -> None:
    parent = SpanContext(bytes(range(16)), bytes(range(8)), TraceFlags.SAMPLED, is_remote=True)

    child = parent.child()

    assert child.trace_id == parent.trace_id
    assert child.span_id != parent.span_id
    assert child.trace_flags == parent.trace_flags
    assert not child.is_remote


def test_all_zero_ids_invalid() -> None:
    assert not SpanContext(bytes(16), bytes(range(1, 9))).is_valid
    assert not SpanContext(bytes(range(1, 17)), bytes(8)).is_valid
    assert SpanContext(bytes(range(1, 17)), bytes(range(1, 9))).is_valid


def test_hex_accessors() -> None:
    ctx = SpanContext(bytes.fromhex("4bf92f3577b34da6a3ce929d0e0e4736"), bytes.fromhex("00f067aa0ba902b7"))
    assert ctx.trace_id_hex == "4bf92f3577b34da6a3ce929d0e0e4736"
    assert ctx.span_id_hex == "00f067aa0ba902b7"
