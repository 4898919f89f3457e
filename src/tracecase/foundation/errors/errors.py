"""Standardized error handling for tracing.

Provides error codes and structured errors for span-state violations,
configuration problems, and export failures.
Uses Pydantic for validation and serialization of the error payload.
"""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class ErrorCode(StrEnum):
    """Standard error codes for tracing failures.

    Used for programmatic error handling and export result classification.
    """
    NOT_RECORDING = "NOT_RECORDING"
    ALREADY_ENDED = "ALREADY_ENDED"
    INVALID_TIMESTAMP = "INVALID_TIMESTAMP"
    INVALID_ATTRIBUTE = "INVALID_ATTRIBUTE"
    CONFIGURATION = "CONFIGURATION"
    TIMEOUT = "TIMEOUT"
    NETWORK_ERROR = "NETWORK_ERROR"
    PROTOCOL_ERROR = "PROTOCOL_ERROR"
    SERIALIZATION_ERROR = "SERIALIZATION_ERROR"
    UNKNOWN = "UNKNOWN"


# Flattened pattern -> code mapping, checked in insertion order
_PATTERN_CODES: dict[str, ErrorCode] = {
    "timeout": ErrorCode.TIMEOUT,
    "timed out": ErrorCode.TIMEOUT,
    "connect": ErrorCode.NETWORK_ERROR,
    "network": ErrorCode.NETWORK_ERROR,
    "refused": ErrorCode.NETWORK_ERROR,
    "unreachable": ErrorCode.NETWORK_ERROR,
    "protocol": ErrorCode.PROTOCOL_ERROR,
    "decod": ErrorCode.PROTOCOL_ERROR,
    "json": ErrorCode.SERIALIZATION_ERROR,
    "encode": ErrorCode.SERIALIZATION_ERROR,
    "serializ": ErrorCode.SERIALIZATION_ERROR,
}
_PATTERN_KEYS = tuple(_PATTERN_CODES.keys())

_RETRYABLE_CODES: frozenset[ErrorCode] = frozenset({
    ErrorCode.TIMEOUT,
    ErrorCode.NETWORK_ERROR,
    ErrorCode.PROTOCOL_ERROR,
})


@lru_cache(maxsize=256)
def _classify_cached(exc_key: str) -> ErrorCode:
    """Cached classification by exception signature."""
    haystack = exc_key.lower()
    for pattern in _PATTERN_KEYS:
        if pattern in haystack:
            return _PATTERN_CODES[pattern]
    return ErrorCode.UNKNOWN


def classify_exception(exc: BaseException) -> ErrorCode:
    """Map exception to error code via pattern matching on name/message."""
    if isinstance(exc, TracecaseError):
        return exc.error.code
    return _classify_cached(f"{type(exc).__name__} {exc}")


class TraceError(BaseModel):
    """Structured error payload.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code for programmatic handling
        recoverable: Whether the failed operation might succeed if repeated
        details: Optional detailed information
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        validate_default=True,
        json_schema_extra={
            "title": "Trace Error",
            "examples": [{
                "message": "Span 'fetch' has already ended",
                "code": "ALREADY_ENDED",
                "recoverable": False,
            }],
        },
    )

    message: Annotated[str, Field(min_length=1, description="Human-readable error message")]
    code: ErrorCode = Field(default=ErrorCode.UNKNOWN, description="Machine-readable error classification")
    recoverable: bool = Field(default=False, description="Whether repeating the operation might succeed")
    details: str | None = Field(default=None, description="Optional detailed error info")

    @field_validator("message", mode="before")
    @classmethod
    def _ensure_message(cls, v: str | Exception) -> str:
        """Accept Exception objects and extract message."""
        return str(v) if isinstance(v, Exception) else v

    @computed_field
    @property
    def is_retryable(self) -> bool:
        """Whether this error is typically transient (timeouts, network, protocol)."""
        return self.code in _RETRYABLE_CODES

    @classmethod
    def from_exception(cls, exc: BaseException, context: str = "") -> Self:
        """Create from exception with auto-classification."""
        code = classify_exception(exc)
        return cls(
            message=f"{context}: {exc}" if context else (str(exc) or type(exc).__name__),
            code=code,
            recoverable=code in _RETRYABLE_CODES,
        )


class TracecaseError(Exception):
    """Base exception carrying a TraceError."""

    code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(self, message: str, *, details: str | None = None) -> None:
        self.error = TraceError(message=message, code=self.code, details=details)
        super().__init__(self.error.message)


class NotRecordingError(TracecaseError):
    """Mutation attempted on a span that has already ended."""

    code = ErrorCode.NOT_RECORDING


class AlreadyEndedError(TracecaseError):
    """``end`` called on a span that has already ended."""

    code = ErrorCode.ALREADY_ENDED


class InvalidTimestampError(TracecaseError):
    """End timestamp earlier than the span's start."""

    code = ErrorCode.INVALID_TIMESTAMP


class AttributeTypeError(TracecaseError, TypeError):
    """Attribute key or value outside the supported value domain."""

    code = ErrorCode.INVALID_ATTRIBUTE


class ConfigurationError(TracecaseError, ValueError):
    """Invalid exporter or tracer configuration, raised at construction time."""

    code = ErrorCode.CONFIGURATION
