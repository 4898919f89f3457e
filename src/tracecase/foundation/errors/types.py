"""Type aliases shared across tracecase."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Union

# JSON type aliases - using Any for recursive slots
JsonPrimitive = Union[str, int, float, bool, None]
JsonValue = Union[JsonPrimitive, list[Any], dict[str, Any]]
JsonDict = dict[str, Any]

# Span attribute domain: scalars and homogeneous sequences of scalars
AttributeScalar = Union[str, bool, int, float]
AttributeValue = Union[AttributeScalar, Sequence[str], Sequence[bool], Sequence[int], Sequence[float]]
Attributes = Mapping[str, AttributeValue]
