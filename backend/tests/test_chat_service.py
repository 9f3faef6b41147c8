"""
CogniTutor - Chat Service Tests
"""
import asyncio
import gc

import pytest

from cognitutor.ai.core.llm import CompletionGateway
from cognitutor.ai.document_extractor import TRUNCATION_MARKER
from cognitutor.core.config import settings
from cognitutor.services import chat as chat_service
from cognitutor.services.chat import ChatService, SessionNotFound, derive_title


def test_derive_title():
    assert derive_title("  Short question  ") == "Short question"
    assert derive_title("a" * 50) == "a" * 50
    assert derive_title("b" * 51) == "b" * 50 + "..."


@pytest.mark.asyncio
async def test_concurrent_sends_are_serialized(db_session, gemini):
    service = ChatService(db_session, gateway=CompletionGateway(gemini.client()))
    session = await service.create_session("learner-1")

    await asyncio.gather(
        service.send_message(session.id, "learner-1", "first", 100),
        service.send_message(session.id, "learner-1", "second", 100),
    )

    stored = await service.get_session(session.id, "learner-1")
    assert [t.position for t in stored.turns] == [0, 1, 2, 3]
    assert [t.role for t in stored.turns] == ["user", "assistant", "user", "assistant"]
    # Each user turn is immediately followed by its own reply
    assert stored.turns[0].content in ("first", "second")
    assert {stored.turns[0].content, stored.turns[2].content} == {"first", "second"}
    assert stored.title == stored.turns[0].content


@pytest.mark.asyncio
async def test_attach_document_caps_content(db_session, monkeypatch):
    monkeypatch.setattr(settings, "DOCUMENT_CONTEXT_MAX_CHARS", 10)
    service = ChatService(db_session)
    session = await service.create_session("learner-1")

    document = await service.attach_document(session.id, "learner-1", "long.txt", "y" * 40, "text/plain")

    assert document.content == "y" * 10 + TRUNCATION_MARKER


@pytest.mark.asyncio
async def test_foreign_session_is_hidden(db_session):
    service = ChatService(db_session)
    session = await service.create_session("learner-1")

    with pytest.raises(SessionNotFound):
        await service.get_session(session.id, "learner-2")
    with pytest.raises(SessionNotFound):
        await service.delete_session(session.id, "learner-2")


@pytest.mark.asyncio
async def test_session_lock_released_after_send(db_session, gemini):
    service = ChatService(db_session, gateway=CompletionGateway(gemini.client()))
    session = await service.create_session("learner-1")

    await service.send_message(session.id, "learner-1", "hello", 100)
    gc.collect()

    assert session.id not in chat_service._session_locks
    assert len(chat_service._session_locks) == 0


@pytest.mark.asyncio
async def test_blank_text_is_refused(db_session, gemini):
    service = ChatService(db_session, gateway=CompletionGateway(gemini.client()))
    session = await service.create_session("learner-1")

    with pytest.raises(ValueError):
        await service.send_message(session.id, "learner-1", "   ", 100)

    stored = await service.get_session(session.id, "learner-1")
    assert stored.turns == []
    assert stored.title == "New Chat"
    assert gemini.requests == []
