"""HTTP/JSON span exporter.

Posts a JSON array of converted spans to a collector endpoint, one request
per export call, and classifies the outcome:

- 2xx                                  -> SUCCESS (body ignored)
- 4xx, unexpected 1xx/3xx              -> FAILED_NOT_RETRYABLE
- 5xx, timeouts, connection/protocol   -> FAILED_RETRYABLE

Transport faults never propagate to the caller.

Example:
    >>> exporter = HttpExporter("http://localhost:9411/api/v2/spans", service_name="checkout")
    >>> result = exporter.export(ended_spans)
    >>> if result.is_retryable:
    ...     requeue(ended_spans)
"""

from __future__ import annotations

import threading
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

import httpx
import orjson

from tracecase.foundation.errors import ConfigurationError, ErrorCode, TraceError

from ..exporter import ExportResult
from ..logging import get_logger

if TYPE_CHECKING:
    from tracecase.foundation.config import TracecaseSettings

    from ..tracing import Span
    from .converter import SpanConverter

SUPPORTED_PATHS: tuple[str, ...] = ("/api/v1/spans", "/api/v2/spans")
DEFAULT_TIMEOUT = 2.0

log = get_logger("tracecase.exporter.http")


def validate_endpoint(endpoint: str, supported_paths: Sequence[str] = SUPPORTED_PATHS) -> str:
    """Check an endpoint has scheme, host, port and a supported API path. Returns the path."""
    try:
        url = urlsplit(endpoint)
        port = url.port
    except ValueError as e:
        raise ConfigurationError(f"Unable to parse endpoint {endpoint!r}: {e}") from e
    if url.scheme not in ("http", "https") or not url.hostname or port is None or not url.path:
        raise ConfigurationError(
            f"Endpoint {endpoint!r} should have an http(s) scheme, host, port and path")
    if url.path not in supported_paths:
        raise ConfigurationError(
            f"Endpoint path {url.path!r} is not supported; use {' or '.join(supported_paths)}")
    return url.path


def classify_status(status_code: int) -> ExportResult:
    """Map an HTTP status to an export result."""
    if 200 <= status_code < 300:
        return ExportResult.SUCCESS
    if status_code >= 500:
        return ExportResult.FAILED_RETRYABLE
    return ExportResult.FAILED_NOT_RETRYABLE


class HttpExporter:
    """Export spans to an HTTP collector as a JSON array.

    Owns one httpx.Client, never shared with other exporters. The endpoint is
    validated at construction so misconfiguration fails fast.

    Args:
        endpoint: Collector URL with scheme, host, port and a supported path
        converter: Span converter; defaults to the Zipkin model matching the path
        service_name: Local service name used by the default converter
        timeout: Request timeout in seconds
        headers: Extra request headers
        transport: Optional httpx transport (e.g. httpx.MockTransport in tests)
    """

    def __init__(
        self,
        endpoint: str,
        converter: SpanConverter | None = None,
        *,
        service_name: str = "tracecase",
        timeout: float = DEFAULT_TIMEOUT,
        headers: Mapping[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        path = validate_endpoint(endpoint)
        if not timeout > 0:
            raise ConfigurationError(f"Export timeout must be positive, got {timeout}")
        if converter is None:
            from .vendors.zipkin import converter_for_path
            converter = converter_for_path(path, service_name)

        self.endpoint = endpoint
        self.converter = converter
        self.timeout = timeout
        request_headers = httpx.Headers(headers or {})
        request_headers["Content-Type"] = "application/json"
        self._client = httpx.Client(timeout=timeout, headers=request_headers, transport=transport)
        self._lock = threading.Lock()
        self._shutdown = False

    @classmethod
    def from_settings(cls, settings: TracecaseSettings, **kw: object) -> HttpExporter:
        """Build from ``settings.exporter``."""
        cfg = settings.exporter
        options: dict[str, object] = {"service_name": cfg.service_name, "timeout": cfg.timeout,
                                      "headers": cfg.headers, **kw}
        return cls(cfg.endpoint, **options)  # type: ignore[arg-type]

    def __repr__(self) -> str:
        return f"HttpExporter(endpoint={self.endpoint!r}, timeout={self.timeout})"

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown

    def export(self, spans: Sequence[Span]) -> ExportResult:
        if self._shutdown:
            log.warning("export after shutdown", endpoint=self.endpoint)
            return ExportResult.FAILED_NOT_RETRYABLE

        batch = list(spans)
        if not batch:
            return ExportResult.SUCCESS

        if recording := [s.name for s in batch if s.is_recording]:
            log.warning("batch contains spans that have not ended", endpoint=self.endpoint, spans=recording)
            return ExportResult.FAILED_NOT_RETRYABLE

        try:
            payload = orjson.dumps([self.converter.convert(s) for s in batch])
        except Exception as e:  # noqa: BLE001 - converter is pluggable
            log.warning("span conversion failed", endpoint=self.endpoint, error=str(e),
                        code=ErrorCode.SERIALIZATION_ERROR.value)
            return ExportResult.FAILED_NOT_RETRYABLE

        try:
            response = self._client.post(self.endpoint, content=payload)
        except httpx.HTTPError as e:
            err = TraceError.from_exception(e, "export")
            log.warning("export request failed", endpoint=self.endpoint, spans=len(batch),
                        error=err.message, code=err.code.value, recoverable=err.recoverable)
            return ExportResult.FAILED_RETRYABLE
        except RuntimeError as e:
            # client closed by a concurrent shutdown
            log.warning("export aborted", endpoint=self.endpoint, error=str(e))
            return ExportResult.FAILED_NOT_RETRYABLE

        result = classify_status(response.status_code)
        if result.is_success:
            log.debug("batch exported", endpoint=self.endpoint, spans=len(batch), status=response.status_code)
        else:
            log.warning("collector rejected batch", endpoint=self.endpoint, spans=len(batch),
                        status=response.status_code, result=result.value)
        return result

    def shutdown(self) -> None:
        with self._lock:
            if self._shutdown:
                return
            self._shutdown = True
        self._client.close()
