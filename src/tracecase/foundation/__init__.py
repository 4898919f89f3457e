"""Foundation: errors, type aliases and configuration."""

from .config import ExporterSettings, LoggingSettings, TracecaseSettings, clear_settings_cache, get_settings
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

__all__ = [
    # Config
    "ExporterSettings",
    "LoggingSettings",
    "TracecaseSettings",
    "clear_settings_cache",
    "get_settings",
    # Errors
    "ErrorCode",
    "TraceError",
    "TracecaseError",
    "NotRecordingError",
    "AlreadyEndedError",
    "InvalidTimestampError",
    "AttributeTypeError",
    "ConfigurationError",
    "classify_exception",
]
