"""OpenTelemetry and structured logging configuration.

Call once at the application entry point, before the app is built::

    from src.config.telemetry import configure_telemetry
    configure_telemetry()
"""

from __future__ import annotations

import contextvars
import logging
import os
from dataclasses import dataclass

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from pythonjsonlogger.json import JsonFormatter

# ---------------------------------------------------------------------------
# Correlation context - set by the request middleware and the routes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _CorrelationContext:
    request_id: str = ""
    product_id: str = ""
    combination_id: str = ""


_correlation_ctx: contextvars.ContextVar[_CorrelationContext | None] = contextvars.ContextVar(
    "correlation_ctx",
    default=None,
)

_EMPTY_CONTEXT = _CorrelationContext()


def set_correlation_context(
    *,
    request_id: str | None = None,
    product_id: int | str | None = None,
    combination_id: int | str | None = None,
) -> None:
    """Update correlation fields available to all log records in the current context.

    Only provided (non-None) fields are changed; the rest keep their current value.
    """
    current = _correlation_ctx.get() or _EMPTY_CONTEXT
    _correlation_ctx.set(
        _CorrelationContext(
            request_id=request_id if request_id is not None else current.request_id,
            product_id=str(product_id) if product_id is not None else current.product_id,
            combination_id=(
                str(combination_id) if combination_id is not None else current.combination_id
            ),
        )
    )


def clear_correlation_context() -> None:
    """Forget every correlation field for the current context."""
    _correlation_ctx.set(None)


def get_request_id() -> str:
    """Return the request id of the current context, ``""`` outside a request."""
    return (_correlation_ctx.get() or _EMPTY_CONTEXT).request_id


# ---------------------------------------------------------------------------
# Logging filter that injects correlation fields
# ---------------------------------------------------------------------------


class CorrelationFilter(logging.Filter):
    """Injects ``request_id``, ``product_id`` and ``combination_id`` into every log record.

    Values come from the current :func:`set_correlation_context` call (via
    *contextvars*), defaulting to ``""`` when unset. A value passed through
    ``extra=`` on the logging call wins over the context.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = _correlation_ctx.get() or _EMPTY_CONTEXT
        for name in ("request_id", "product_id", "combination_id"):
            if not hasattr(record, name):
                setattr(record, name, getattr(ctx, name))
        return True


# ---------------------------------------------------------------------------
# Idempotency guard
# ---------------------------------------------------------------------------

_configured = False


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def configure_telemetry() -> None:
    """Set up OpenTelemetry tracing + JSON structured logging.

    Safe to call multiple times - subsequent calls are no-ops.

    Environment variables consumed:

    * ``OTEL_SERVICE_NAME`` - resource ``service.name`` (default ``combination-admin-api``)
    * ``APP_COMMIT_SHA`` - resource ``service.version`` (default ``unknown``)
    * ``OTEL_EXPORTER_OTLP_ENDPOINT`` - gRPC collector (default ``http://localhost:4317``)
    * ``LOG_LEVEL`` - root log level (default ``INFO``)
    """
    global _configured
    if _configured:
        return
    _configured = True

    # ── Tracing ──────────────────────────────────────────────────────────
    resource = Resource.create(
        {
            "service.name": os.getenv("OTEL_SERVICE_NAME", "combination-admin-api"),
            "service.version": os.getenv("APP_COMMIT_SHA", "unknown"),
        }
    )

    provider = TracerProvider(resource=resource)

    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4317")
    exporter = OTLPSpanExporter(endpoint=endpoint, insecure=True)
    provider.add_span_processor(BatchSpanProcessor(exporter))

    trace.set_tracer_provider(provider)

    # Injects otelTraceID / otelSpanID / otelServiceName into log records.
    LoggingInstrumentor().instrument(set_logging_format=False)

    # ── JSON structured logging ──────────────────────────────────────────
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    formatter = JsonFormatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s "
        "%(otelTraceID)s %(otelSpanID)s %(otelServiceName)s "
        "%(request_id)s %(product_id)s %(combination_id)s",
        rename_fields={
            "asctime": "timestamp",
            "levelname": "level",
            "otelTraceID": "trace_id",
            "otelSpanID": "span_id",
            "otelServiceName": "service",
        },
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    handler.addFilter(CorrelationFilter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(log_level)
