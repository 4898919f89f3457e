"""Environment-based configuration using pydantic-settings.

Provides type-safe, validated configuration from environment variables
with sensible defaults. Supports .env files and nested configuration.

Example:
    >>> from tracecase.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.exporter.timeout
    2.0
    >>> settings.logging.level
    'INFO'

    # Or with environment variables:
    # TRACECASE_EXPORTER_ENDPOINT=http://zipkin:9411/api/v2/spans
    # TRACECASE_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, PositiveFloat, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TRACECASE_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class ExporterSettings(BaseSettings):
    """Span export configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TRACECASE_EXPORTER_",
        extra="ignore",
    )

    kind: Literal["http", "console", "json", "none"] = "none"
    endpoint: str = Field(
        default="http://localhost:9411/api/v2/spans",
        description="Collector endpoint (scheme, host, port and a supported API path)",
    )
    service_name: str = Field(default="tracecase", min_length=1)
    timeout: PositiveFloat = Field(default=2.0, description="Export request timeout in seconds")
    headers: dict[str, str] = Field(default_factory=dict, description="Extra request headers")


class TracecaseSettings(BaseSettings):
    """Root settings for tracecase.

    Loads configuration from environment variables with TRACECASE_ prefix.
    Supports nested configuration and .env files.

    Example environment variables:
        TRACECASE_DEBUG=true
        TRACECASE_LOG_LEVEL=DEBUG
        TRACECASE_EXPORTER_KIND=http
        TRACECASE_EXPORTER_TIMEOUT=5
    """

    model_config = SettingsConfigDict(
        env_prefix="TRACECASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    debug: bool = Field(default=False, description="Enable debug mode")

    # Nested settings (loaded with TRACECASE_LOG_, TRACECASE_EXPORTER_)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    exporter: ExporterSettings = Field(default_factory=ExporterSettings)

    @computed_field
    @property
    def export_enabled(self) -> bool:
        """Whether spans leave the process at all."""
        return self.exporter.kind != "none"


@lru_cache(maxsize=1)
def get_settings() -> TracecaseSettings:
    """Get the global settings instance (cached)."""
    return TracecaseSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
