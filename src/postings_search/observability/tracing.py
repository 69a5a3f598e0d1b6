"""OpenTelemetry spans plus a lightweight trace context for log correlation."""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
import logging
from typing import TYPE_CHECKING, Any, TextIO

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor
from opentelemetry.trace import SpanKind, Status, StatusCode


if TYPE_CHECKING:
    from collections.abc import Generator

    from opentelemetry.trace import Span, Tracer

logger = logging.getLogger(__name__)

# Ids of the innermost active span, read by the JSON log formatter
trace_context: ContextVar[dict[str, str] | None] = ContextVar("trace_context", default=None)

_tracer_holder: dict[str, Any] = {"tracer": None, "provider": None}


def get_trace_context() -> dict[str, str]:
    """Return the active span's ``trace_id``/``span_id``, empty outside any span."""
    return trace_context.get() or {}


def init_tracing(
    service_name: str = "postings-search",
    resource_attributes: dict[str, str] | None = None,
) -> TracerProvider:
    """Initialize OpenTelemetry tracing once per process."""
    provider = _tracer_holder.get("provider")
    if isinstance(provider, TracerProvider):
        return provider

    attributes = {"service.name": service_name}
    if resource_attributes:
        attributes.update(resource_attributes)
    provider = TracerProvider(resource=Resource.create(attributes))
    trace.set_tracer_provider(provider)
    _tracer_holder["provider"] = provider
    _tracer_holder["tracer"] = trace.get_tracer(__name__)
    logger.debug("Tracing initialized for service: %s", service_name)
    return provider


def get_tracer() -> Tracer:
    if _tracer_holder["tracer"] is None:
        _tracer_holder["tracer"] = trace.get_tracer(__name__)
    return _tracer_holder["tracer"]  # type: ignore[return-value]


@contextmanager
def console_tracing(out: TextIO) -> Generator[TracerProvider, None, None]:
    """Write every span finished inside the block to ``out``.

    Spans go through a provider that lives only for the block, so nesting or
    repeating the block never prints a span twice.
    """
    provider = TracerProvider(resource=init_tracing().resource)
    provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter(out=out)))
    previous = _tracer_holder["tracer"]
    _tracer_holder["tracer"] = provider.get_tracer(__name__)
    try:
        yield provider
    finally:
        _tracer_holder["tracer"] = previous
        provider.shutdown()


@contextmanager
def create_span(
    name: str,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: dict[str, Any] | None = None,
) -> Generator[Span, None, None]:
    """Create a traced span and expose its ids to log records while it is active."""
    tracer = get_tracer()
    with tracer.start_as_current_span(name, kind=kind) as span:
        if attributes:
            for key, value in attributes.items():
                span.set_attribute(key, value)

        ctx = span.get_span_context()
        token = None
        if ctx.is_valid:
            token = trace_context.set(
                {"trace_id": format(ctx.trace_id, "032x"), "span_id": format(ctx.span_id, "016x")}
            )

        try:
            yield span
        except Exception as exc:
            span.set_status(Status(StatusCode.ERROR, str(exc)))
            span.record_exception(exc)
            raise
        finally:
            if token is not None:
                trace_context.reset(token)
