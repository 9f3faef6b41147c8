"""
CogniTutor - Completion Gateway Tests
"""
import httpx
import pytest

from cognitutor.ai.core.llm import (
    SHAPE_FALLBACK_REPLY,
    TRANSPORT_FALLBACK_REPLY,
    CompletionGateway,
    ShapeMismatch,
    TransportFailure,
    extract_candidate_text,
)
from cognitutor.ai.prompt_composer import CHAT_GENERATION_CONFIG, compose_single_prompt


@pytest.fixture
def payload():
    return compose_single_prompt("Explain fractions", CHAT_GENERATION_CONFIG)


@pytest.mark.asyncio
async def test_successful_completion(gemini, payload):
    gemini.queue("Fractions are parts of a whole.")
    reply = await CompletionGateway(gemini.client()).complete(payload)

    assert reply == "Fractions are parts of a whole."
    request = gemini.requests[0]
    assert request.method == "POST"
    assert request.url.path.endswith(":generateContent")
    assert request.url.params["key"] == "test-key"
    assert gemini.last_body()["contents"][0]["parts"][0]["text"] == "Explain fractions"


@pytest.mark.asyncio
async def test_server_error_returns_transport_reply(gemini, payload):
    gemini.queue(httpx.Response(500, text="internal"))
    reply = await CompletionGateway(gemini.client()).complete(payload)
    assert reply == TRANSPORT_FALLBACK_REPLY


@pytest.mark.asyncio
async def test_missing_candidates_returns_shape_reply(gemini, payload):
    gemini.queue({})
    reply = await CompletionGateway(gemini.client()).complete(payload)
    assert reply == SHAPE_FALLBACK_REPLY


@pytest.mark.asyncio
async def test_connection_error_returns_transport_reply(gemini, payload):
    gemini.queue(httpx.ConnectError("connection refused"))
    reply = await CompletionGateway(gemini.client()).complete(payload)
    assert reply == TRANSPORT_FALLBACK_REPLY


@pytest.mark.asyncio
async def test_non_json_body_returns_transport_reply(gemini, payload):
    gemini.queue(httpx.Response(200, text="<html>oops</html>"))
    reply = await CompletionGateway(gemini.client()).complete(payload)
    assert reply == TRANSPORT_FALLBACK_REPLY


@pytest.mark.asyncio
async def test_missing_api_key_never_calls_endpoint(gemini, payload):
    reply = await CompletionGateway(gemini.client(api_key="")).complete(payload)
    assert reply == TRANSPORT_FALLBACK_REPLY
    assert gemini.requests == []


@pytest.mark.asyncio
async def test_client_raises_typed_errors(gemini, payload):
    client = gemini.client()
    gemini.queue(httpx.Response(503, text="busy"))
    with pytest.raises(TransportFailure) as exc_info:
        await client.generate(payload)
    assert exc_info.value.status_code == 503

    gemini.queue({"candidates": []})
    with pytest.raises(ShapeMismatch):
        await client.generate(payload)


@pytest.mark.parametrize(
    "body",
    [
        [],
        {"candidates": [{}]},
        {"candidates": [{"content": {"parts": []}}]},
        {"candidates": [{"content": {"parts": [{"text": 42}]}}]},
    ],
)
def test_extract_candidate_text_rejects_bad_shapes(body):
    with pytest.raises(ShapeMismatch):
        extract_candidate_text(body)
