"""Unified error handling for tracecase.

- ErrorCode: Standard error codes for tracing failures
- TraceError/TracecaseError: Structured errors and the exception hierarchy
- classify_exception: Map arbitrary (transport) exceptions to error codes
- Type aliases for JSON payloads and span attributes
"""

from .errors import (
    AlreadyEndedError,
    AttributeTypeError,
    ConfigurationError,
    ErrorCode,
    InvalidTimestampError,
    NotRecordingError,
    TraceError,
    TracecaseError,
    classify_exception,
)
from .types import AttributeScalar, Attributes, AttributeValue, JsonDict, JsonPrimitive, JsonValue

__all__ = [
    # Core errors
    "ErrorCode", "TraceError", "TracecaseError", "classify_exception",
    # Span-state and configuration errors
    "NotRecordingError", "AlreadyEndedError", "InvalidTimestampError",
    "AttributeTypeError", "ConfigurationError",
    # Type aliases
    "JsonDict", "JsonPrimitive", "JsonValue",
    "AttributeScalar", "AttributeValue", "Attributes",
]
