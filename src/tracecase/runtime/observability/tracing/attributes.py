"""Attribute value domain for spans, events and links.

Values are str, bool, int (signed 64-bit), float, or a homogeneous
sequence of one of those. Sequences are normalized to tuples so stored
attributes can never be mutated through a caller's reference.
"""

from __future__ import annotations

from collections.abc import Mapping

from tracecase.foundation.errors import AttributeTypeError, AttributeValue

_INT64_MIN, _INT64_MAX = -(2**63), 2**63 - 1

# bool is checked before int: bool is an int subclass but a distinct attribute type
_SCALAR_TYPES: tuple[type, ...] = (bool, str, int, float)


def _scalar_type(value: object) -> type | None:
    for t in _SCALAR_TYPES:
        if isinstance(value, t):
            return t
    return None


def _check_int(key: str, value: int) -> None:
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise AttributeTypeError(f"Attribute {key!r}: integer {value} is outside the int64 range")


def validate_attribute(key: object, value: object) -> AttributeValue:
    """Validate one attribute and return its normalized (immutable) value.

    Raises:
        AttributeTypeError: key is not a str, or value is outside the domain
    """
    if not isinstance(key, str):
        raise AttributeTypeError(f"Attribute key must be str, got {type(key).__name__}")

    kind = _scalar_type(value)
    if kind is not None:
        if kind is int:
            _check_int(key, value)  # type: ignore[arg-type]
        return value  # type: ignore[return-value]

    if isinstance(value, (list, tuple)):
        items = tuple(value)
        kinds = {_scalar_type(v) for v in items}
        if None in kinds:
            bad = next(v for v in items if _scalar_type(v) is None)
            raise AttributeTypeError(
                f"Attribute {key!r}: sequence element of type {type(bad).__name__} is not supported")
        if len(kinds) > 1:
            names = ", ".join(sorted(k.__name__ for k in kinds if k is not None))
            raise AttributeTypeError(f"Attribute {key!r}: sequence must be homogeneous, got {names}")
        if kinds == {int}:
            for v in items:
                _check_int(key, v)
        return items

    raise AttributeTypeError(f"Attribute {key!r}: value of type {type(value).__name__} is not supported")


def validate_attributes(attributes: Mapping[str, object] | None) -> dict[str, AttributeValue]:
    """Validate a whole mapping before anything is stored.

    Returns a new dict; the input is never retained.
    """
    if not attributes:
        return {}
    if not isinstance(attributes, Mapping):
        raise AttributeTypeError(f"Attributes must be a mapping, got {type(attributes).__name__}")
    return {k: validate_attribute(k, v) for k, v in attributes.items()}
