"""
Distributed tracing for the todo service using OpenTelemetry.

Spans are created through the global tracer provider. Until setup_tracing()
installs an SDK provider the spans are no-ops, so store and tool code can
always wrap work in trace_span().
"""
import logging
from typing import Optional, Dict, Any
from contextlib import contextmanager

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor

from todo_mcp import __version__

logger = logging.getLogger(__name__)

_configured = False


def setup_tracing(
    service_name: str = "todo-mcp-service",
    otlp_endpoint: Optional[str] = None,
    console: bool = False
) -> None:
    """
    Install an SDK tracer provider with the configured exporters.

    Args:
        service_name: Value of the service.name resource attribute
        otlp_endpoint: OTLP gRPC collector endpoint; skipped when None
        console: Also print finished spans to stdout
    """
    global _configured

    if _configured:
        logger.warning("Tracing already initialized")
        return

    logger.info(
        "Initializing OpenTelemetry tracing",
        extra={"service_name": service_name, "otlp_endpoint": otlp_endpoint}
    )

    resource = Resource.create({
        "service.name": service_name,
        "service.version": __version__,
    })
    provider = TracerProvider(resource=resource)

    if otlp_endpoint:
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True)))
        logger.info("OTLP exporter configured", extra={"endpoint": otlp_endpoint})
    if console:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        logger.info("Console exporter enabled")

    trace.set_tracer_provider(provider)
    _configured = True
    logger.info("OpenTelemetry tracing initialized successfully")


def instrument_fastapi(app) -> None:
    """Instrument FastAPI application with OpenTelemetry."""
    FastAPIInstrumentor.instrument_app(app)
    logger.info("FastAPI instrumentation enabled")


def instrument_httpx() -> None:
    """Instrument HTTPX clients (remote store calls) with OpenTelemetry."""
    HTTPXClientInstrumentor().instrument()
    logger.info("HTTPX instrumentation enabled")


def _set_attribute(span, key: str, value: Any) -> None:
    if isinstance(value, (str, int, float, bool)):
        span.set_attribute(key, value)
    else:
        span.set_attribute(key, str(value))


@contextmanager
def trace_span(
    name: str,
    attributes: Optional[Dict[str, Any]] = None,
    kind: trace.SpanKind = trace.SpanKind.INTERNAL
):
    """
    Context manager for creating a trace span.

    Args:
        name: Name of the span
        attributes: Optional attributes to add to the span; None values are skipped
        kind: Span kind (INTERNAL, SERVER, CLIENT, etc.)

    Example:
        with trace_span("store.get", {"todo.id": task_id}):
            storage.get(task_id)
    """
    tracer = trace.get_tracer(__name__)
    with tracer.start_as_current_span(name, kind=kind) as span:
        for key, value in (attributes or {}).items():
            if value is not None:
                _set_attribute(span, key, value)
        try:
            yield span
        except Exception as e:
            span.record_exception(e)
            span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
            raise


def add_span_attribute(key: str, value: Any) -> None:
    """Add an attribute to the current active span."""
    span = trace.get_current_span()
    if span and value is not None:
        _set_attribute(span, key, value)
