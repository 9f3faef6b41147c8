"""
CogniTutor - Generative Language Client
Single-shot access to the generateContent endpoint plus the chat-facing
gateway that turns every failure into a safe reply.
"""
import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from cognitutor.ai.core.telemetry import agent_span, record_fallback, trace_llm_call
from cognitutor.ai.prompt_composer import RequestPayload
from cognitutor.core.config import settings

logger = logging.getLogger(__name__)


TRANSPORT_FALLBACK_REPLY = (
    "I'm sorry, I encountered an error while processing your request. Please try again."
)
SHAPE_FALLBACK_REPLY = (
    "I'm sorry, I'm having trouble processing your request right now. Please try again."
)


class CompletionError(Exception):
    """Base class for generation-domain failures."""
    reason = "completion_error"


class TransportFailure(CompletionError):
    """The call itself failed: no key, network error, timeout or non-success status."""
    reason = "transport_failure"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ShapeMismatch(CompletionError):
    """The call succeeded but the body lacks candidates[0].content.parts[0].text."""
    reason = "shape_mismatch"


@dataclass
class LLMResponse:
    """Text of the first candidate together with usage metadata."""
    content: str
    model: str
    tokens_prompt: int = 0
    tokens_completion: int = 0
    tokens_total: int = 0
    raw_response: Any = None


def extract_candidate_text(data: Any) -> str:
    """Return the first candidate's first part text, or raise ShapeMismatch."""
    if not isinstance(data, dict):
        raise ShapeMismatch("response body is not an object")
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        raise ShapeMismatch("response has no candidates")
    content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
    if not isinstance(content, dict):
        raise ShapeMismatch("first candidate has no content")
    parts = content.get("parts")
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        raise ShapeMismatch("candidate content has no parts")
    text = parts[0].get("text")
    if not isinstance(text, str):
        raise ShapeMismatch("first part has no text")
    return text


class GeminiClient:
    """
    Client for the generateContent REST endpoint.

    One POST per call, no retries, bounded by LLM_TIMEOUT_SECONDS.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        api_base: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            api_key: API key. Defaults to settings.
            model: Model name. Defaults to settings.
            api_base: Versioned API base URL. Defaults to settings.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used to stub the endpoint in tests).
        """
        self.api_key = settings.GEMINI_API_KEY if api_key is None else api_key
        self.model = model or settings.GEMINI_MODEL
        self.api_base = (api_base or settings.GEMINI_API_BASE).rstrip("/")
        self.timeout = timeout or settings.LLM_TIMEOUT_SECONDS
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self.api_base}/models/{self.model}:generateContent"

    async def generate(self, payload: RequestPayload) -> LLMResponse:
        """
        Send the payload and return the first candidate's text.

        Raises:
            TransportFailure: the request could not be completed successfully.
            ShapeMismatch: the response lacks the expected nested text field.
        """
        if not self.api_key:
            raise TransportFailure("GEMINI_API_KEY is not configured")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.endpoint,
                    params={"key": self.api_key},
                    json=payload.to_request_body(),
                )
        except httpx.HTTPError as e:
            raise TransportFailure(f"{type(e).__name__}: {e}") from e

        if not response.is_success:
            raise TransportFailure(
                f"endpoint returned {response.status_code}: {response.text[:500]}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise TransportFailure("response body is not valid JSON", status_code=response.status_code) from e

        text = extract_candidate_text(data)

        usage = data.get("usageMetadata") or {}
        return LLMResponse(
            content=text,
            model=self.model,
            tokens_prompt=usage.get("promptTokenCount", 0),
            tokens_completion=usage.get("candidatesTokenCount", 0),
            tokens_total=usage.get("totalTokenCount", 0),
            raw_response=data,
        )

    async def generate_text(self, payload: RequestPayload, operation: str = "llm.generate") -> str:
        """Traced variant of generate() that returns only the text."""
        with agent_span(operation, "GeminiClient", {"llm.model": self.model}) as span:
            span.set_attribute("llm.content_count", len(payload.contents))
            response = await self.generate(payload)
            trace_llm_call(
                model=response.model,
                prompt_tokens=response.tokens_prompt,
                completion_tokens=response.tokens_completion,
                total_tokens=response.tokens_total,
            )
            span.set_attribute("llm.response_length", len(response.content))
            return response.content


class CompletionGateway:
    """
    Chat-facing wrapper around GeminiClient.

    complete() never raises: transport failures and malformed responses are
    logged and replaced by a fixed apology so the conversation can continue.
    """

    def __init__(self, client: Optional[GeminiClient] = None):
        self.client = client or GeminiClient()

    async def complete(self, payload: RequestPayload) -> str:
        with agent_span("chat.complete", "CompletionGateway"):
            try:
                return await self.client.generate_text(payload, operation="llm.chat")
            except ShapeMismatch as e:
                self._log_fallback(e.reason, str(e))
                return SHAPE_FALLBACK_REPLY
            except TransportFailure as e:
                self._log_fallback(e.reason, str(e), status_code=e.status_code)
                return TRANSPORT_FALLBACK_REPLY
            except Exception as e:
                logger.exception("Unexpected error during chat completion")
                self._log_fallback("unexpected_error", str(e))
                return TRANSPORT_FALLBACK_REPLY

    @staticmethod
    def _log_fallback(reason: str, detail: str, status_code: Optional[int] = None) -> None:
        record_fallback(reason, "completion")
        logger.warning(
            "Chat completion fell back to default reply (%s): %s",
            reason,
            detail,
            extra={"fallback_reason": reason, "status_code": status_code},
        )


# Default instances
_default_client: Optional[GeminiClient] = None
_default_gateway: Optional[CompletionGateway] = None


def get_llm_client() -> GeminiClient:
    """Get the default client instance."""
    global _default_client
    if _default_client is None:
        _default_client = GeminiClient()
    return _default_client


def get_completion_gateway() -> CompletionGateway:
    """Get the default gateway instance."""
    global _default_gateway
    if _default_gateway is None:
        _default_gateway = CompletionGateway(get_llm_client())
    return _default_gateway
