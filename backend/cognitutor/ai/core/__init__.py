# AI Core Module - model gateway and tracing

from cognitutor.ai.core.llm import (
    CompletionError,
    CompletionGateway,
    GeminiClient,
    LLMResponse,
    ShapeMismatch,
    TransportFailure,
    get_completion_gateway,
    get_llm_client,
)
from cognitutor.ai.core.telemetry import agent_span, get_tracer, init_telemetry, record_fallback

__all__ = [
    # LLM
    "CompletionError",
    "CompletionGateway",
    "GeminiClient",
    "LLMResponse",
    "ShapeMismatch",
    "TransportFailure",
    "get_completion_gateway",
    "get_llm_client",
    # Telemetry
    "agent_span",
    "get_tracer",
    "init_telemetry",
    "record_fallback",
]
