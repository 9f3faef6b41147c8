"""
CogniTutor - Telemetry Module
OpenTelemetry-based observability for the generation and extraction pipelines
"""
import logging
from typing import Optional
from contextlib import contextmanager

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.resources import Resource
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.trace import Status, StatusCode

from cognitutor.core.config import settings

logger = logging.getLogger(__name__)

# Global tracer instance
_tracer: Optional[trace.Tracer] = None


def init_telemetry() -> trace.Tracer:
    """
    Initialize OpenTelemetry and return the pipeline tracer.
    Call this once at application startup.

    Spans are exported over OTLP only when OTEL_EXPORTER_OTLP_ENDPOINT is set;
    otherwise the provider records spans without exporting them.
    """
    global _tracer

    if _tracer is not None:
        return _tracer

    resource = Resource.create({
        "service.name": settings.OTEL_SERVICE_NAME,
        "service.version": settings.APP_VERSION,
        "deployment.environment": settings.ENVIRONMENT,
    })

    provider = TracerProvider(resource=resource)

    if settings.OTEL_EXPORTER_OTLP_ENDPOINT:
        try:
            otlp_exporter = OTLPSpanExporter(
                endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT,
                insecure=True,
            )
            provider.add_span_processor(BatchSpanProcessor(otlp_exporter))
        except Exception as e:
            logger.warning(f"[Telemetry] Failed to configure OTLP exporter: {e}")

    trace.set_tracer_provider(provider)
    _tracer = trace.get_tracer("cognitutor.pipelines", settings.APP_VERSION)

    logger.info(
        "[Telemetry] Initialized with service: %s, endpoint: %s",
        settings.OTEL_SERVICE_NAME,
        settings.OTEL_EXPORTER_OTLP_ENDPOINT or "<none>",
    )
    return _tracer


def get_tracer() -> trace.Tracer:
    """Get the global tracer instance, initializing if necessary."""
    global _tracer
    if _tracer is None:
        return init_telemetry()
    return _tracer


@contextmanager
def agent_span(
    name: str,
    component: str,
    attributes: Optional[dict] = None
):
    """
    Context manager for creating pipeline execution spans.

    Usage:
        with agent_span("generate_questions", "QuestionSetGenerator") as span:
            span.set_attribute("questions.accepted", 12)
    """
    tracer = get_tracer()
    with tracer.start_as_current_span(name) as span:
        span.set_attribute("component.name", component)
        span.set_attribute("component.operation", name)

        if attributes:
            for key, value in attributes.items():
                span.set_attribute(key, str(value) if value is not None else "")

        try:
            yield span
        except Exception as e:
            span.set_status(Status(StatusCode.ERROR, str(e)))
            span.record_exception(e)
            raise


def record_fallback(reason: str, component: str) -> None:
    """Mark the current span as having degraded to a fallback result."""
    span = trace.get_current_span()
    if span:
        span.set_attribute(f"{component}.fallback", True)
        span.set_attribute(f"{component}.fallback_reason", reason)


def trace_llm_call(
    model: str,
    prompt_tokens: int = 0,
    completion_tokens: int = 0,
    total_tokens: int = 0,
):
    """
    Record LLM-specific telemetry attributes on the current span.
    Call this within an active span to add token usage metrics.
    """
    span = trace.get_current_span()
    if span:
        span.set_attribute("llm.model", model)
        span.set_attribute("llm.tokens.prompt", prompt_tokens)
        span.set_attribute("llm.tokens.completion", completion_tokens)
        span.set_attribute("llm.tokens.total", total_tokens)
