"""
CogniTutor - Prompt Composer Tests
"""
from types import SimpleNamespace

from cognitutor.ai.prompt_composer import (
    CHAT_GENERATION_CONFIG,
    DOCUMENT_CONTEXT_HEADER,
    DOCUMENT_DIRECTIVE,
    TIER_DIRECTIVES,
    build_document_context,
    compose_request,
    compose_system_prompt,
)
from cognitutor.ai.tier_classifier import CognitiveTier, classify_tier
from cognitutor.schemas.chat import ChatRole, ConversationTurn


def test_low_tier_prompt_with_documents():
    prompt = compose_system_prompt(classify_tier(75), has_documents=True)

    assert "assessment score of 75" in prompt
    assert "(LOW category)" in prompt
    heading, directives = TIER_DIRECTIVES[CognitiveTier.LOW]
    assert heading in prompt
    for directive in directives:
        assert f"- {directive}" in prompt
    assert prompt.endswith(DOCUMENT_DIRECTIVE)


def test_prompt_only_contains_own_tier():
    prompt = compose_system_prompt(classify_tier(130), has_documents=False)
    assert TIER_DIRECTIVES[CognitiveTier.HIGH][0] in prompt
    assert TIER_DIRECTIVES[CognitiveTier.LOW][0] not in prompt
    assert TIER_DIRECTIVES[CognitiveTier.MEDIUM][0] not in prompt
    assert "REFERENCE DOCUMENTS" not in prompt


def test_document_context_rendering():
    docs = [
        SimpleNamespace(name="a.txt", content="Alpha"),
        SimpleNamespace(name="b.pdf", content="Beta"),
    ]
    context = build_document_context(docs)
    assert context.startswith(DOCUMENT_CONTEXT_HEADER)
    assert 'Document: "a.txt"\nContent:\nAlpha\n---\n\nDocument: "b.pdf"\nContent:\nBeta\n---' in context
    assert build_document_context([]) == ""


def test_compose_request_orders_contents():
    turns = [
        ConversationTurn(role=ChatRole.USER, content="What is gravity?"),
        ConversationTurn(role=ChatRole.ASSISTANT, content="A force."),
    ]
    payload = compose_request("SYSTEM", turns, "Tell me more")
    body = payload.to_request_body()

    assert [c["role"] for c in body["contents"]] == ["user", "user", "model", "user"]
    assert [c["parts"][0]["text"] for c in body["contents"]] == [
        "SYSTEM", "What is gravity?", "A force.", "Tell me more",
    ]
    assert body["generationConfig"] == {
        "temperature": 0.7,
        "topK": 40,
        "topP": 0.95,
        "maxOutputTokens": 1024,
    }
    assert payload.generation_config == CHAT_GENERATION_CONFIG
