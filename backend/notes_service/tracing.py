"""
Notes Service — Tracing
========================

What:  OpenTelemetry tracer provider setup and the `traced` wrapper that puts
       one span around every operation handler invocation.
How:   `setup_tracing()` builds a TracerProvider tagged with the service name
       and attaches the configured exporter (console by default). The
       dispatcher asks the provider for a tracer and wraps each contract's
       handler with `traced(tracer, <operation name>, <attribute function>)`.

Span lifecycle:
    open  → before the handler runs (attributes from the validated inputs)
    close → after the handler returns or raises; on failure the exception is
            recorded and the span status is set to ERROR
"""

import functools
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, TypeVar

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.trace import Status, StatusCode

from notes_service.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])

AttributeFactory = Callable[[Mapping[str, Any]], Mapping[str, Any]]

TRACER_NAME = "notes_service"


def setup_tracing(config: Optional[Settings] = None) -> TracerProvider:
    """
    Build the process tracer provider.

    Exporters:
        console  BatchSpanProcessor(ConsoleSpanExporter())
        none     no processor; spans are created but not exported
    """
    config = config or default_settings
    provider = TracerProvider(resource=Resource.create({SERVICE_NAME: config.service_name}))
    if config.trace_exporter == "console":
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
    logger.info("Tracing configured (exporter=%s)", config.trace_exporter)
    return provider


def traced(
    tracer: trace.Tracer,
    span_name: str,
    attributes: Optional[AttributeFactory] = None,
) -> Callable[[F], F]:
    """
    Wrap an async callable in a span named `span_name`.

    `attributes` receives the call's keyword arguments and returns the
    attributes to set when the span opens.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            span_attributes: Dict[str, Any] = dict(attributes(kwargs)) if attributes else {}
            with tracer.start_as_current_span(
                span_name,
                attributes=span_attributes,
                record_exception=False,
                set_status_on_exception=False,
            ) as span:
                try:
                    result = await func(*args, **kwargs)
                except Exception as exc:
                    span.record_exception(exc)
                    span.set_status(Status(StatusCode.ERROR, str(exc) or type(exc).__name__))
                    raise
                span.set_status(Status(StatusCode.OK))
                return result

        return wrapper  # type: ignore[return-value]

    return decorator
