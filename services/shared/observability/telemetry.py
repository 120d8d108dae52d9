"""
Telemetry bootstrap for the suggestion service.

`setup_telemetry` installs JSON logging (tagged with service name, request ID
and trace IDs) and, when `ENABLE_TELEMETRY` is truthy, OpenTelemetry tracing for
the FastAPI app and the outbound httpx calls made to the AI providers.
"""

from __future__ import annotations

import logging
import os
from contextvars import ContextVar, Token
from uuid import uuid4

from fastapi import FastAPI, Request
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from pythonjsonlogger import jsonlogger

from shared.provider_settings import parse_bool

CORRELATION_ID_HEADER = "x-request-id"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s %(service_name)s %(request_id)s %(trace_id)s %(span_id)s"
RequestContextToken = Token

_logging_configured = False
_httpx_instrumented = False
_request_id_ctx_var: ContextVar[str | None] = ContextVar("request_id", default=None)


def setup_telemetry(app: FastAPI, service_name: str) -> None:
    """
    Configure logging and optional tracing for the provided FastAPI app.

    Args:
        app: FastAPI app instance that should emit spans/logs.
        service_name: Logical service identifier, overridable via OTEL_SERVICE_NAME.
    """

    service_label = os.getenv("OTEL_SERVICE_NAME", service_name)
    traces_enabled = parse_bool(os.getenv("ENABLE_TELEMETRY", "false"))

    configure_logging(service_label, traces_enabled=traces_enabled)
    if not traces_enabled:
        return

    _configure_tracing(service_label, parse_bool(os.getenv("OTEL_CONSOLE_EXPORT", "false")))
    FastAPIInstrumentor.instrument_app(app)
    _instrument_httpx()


def configure_logging(service_name: str, *, traces_enabled: bool = False, level: str | None = None) -> None:
    """Install the JSON log handler once per process."""

    global _logging_configured
    if _logging_configured:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(jsonlogger.JsonFormatter(LOG_FORMAT))
    handler.addFilter(_ContextLogFilter(service_name, traces_enabled))

    logging.basicConfig(level=level or os.getenv("LOG_LEVEL", "INFO").upper(), handlers=[handler], force=True)
    _logging_configured = True


def ensure_request_id(request: Request | None, header_name: str = CORRELATION_ID_HEADER) -> str:
    """Reuse the caller's x-request-id header or mint a UUID4."""

    if request is not None:
        existing = request.headers.get(header_name) or getattr(request.state, "request_id", None)
        if existing:
            request.state.request_id = existing
            return existing

    request_id = str(uuid4())
    if request is not None:
        request.state.request_id = request_id
    return request_id


def bind_request_context(request_id: str | None) -> RequestContextToken:
    return _request_id_ctx_var.set(request_id)


def reset_request_context(token: RequestContextToken | None) -> None:
    if token is not None:
        _request_id_ctx_var.reset(token)


def current_request_id() -> str | None:
    return _request_id_ctx_var.get()


def _configure_tracing(service_name: str, enable_console_export: bool) -> None:
    if isinstance(trace.get_tracer_provider(), TracerProvider):
        return

    provider = TracerProvider(resource=Resource.create({SERVICE_NAME: service_name}))
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4318/v1/traces")
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
    if enable_console_export:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)


def _instrument_httpx() -> None:
    global _httpx_instrumented
    if _httpx_instrumented:
        return
    HTTPXClientInstrumentor().instrument()
    _httpx_instrumented = True


class _ContextLogFilter(logging.Filter):
    def __init__(self, service_name: str, traces_enabled: bool) -> None:
        super().__init__()
        self._service_name = service_name
        self._traces_enabled = traces_enabled

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        record.service_name = self._service_name
        record.request_id = _request_id_ctx_var.get()
        record.trace_id = None
        record.span_id = None

        if self._traces_enabled:
            span_context = trace.get_current_span().get_span_context()
            if span_context.is_valid:
                record.trace_id = format(span_context.trace_id, "032x")
                record.span_id = format(span_context.span_id, "016x")
        return True
