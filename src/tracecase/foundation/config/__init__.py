"""Configuration management using pydantic-settings.

Provides environment-based configuration with type safety and validation.
"""

from .settings import (
    ExporterSettings,
    LoggingSettings,
    TracecaseSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "ExporterSettings",
    "LoggingSettings",
    "TracecaseSettings",
    "clear_settings_cache",
    "get_settings",
]
