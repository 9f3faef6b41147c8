"""
CogniTutor - Test Configuration
Pytest fixtures and configuration for testing
"""
import json
from collections.abc import AsyncGenerator
from typing import Any, Callable, Optional, Union

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

import cognitutor.models  # noqa: F401
from cognitutor.ai.core.llm import CompletionGateway, GeminiClient
from cognitutor.ai.question_generator import QuestionSetGenerator
from cognitutor.api.deps import get_gateway, get_question_generator
from cognitutor.core.database import Base, get_db
from cognitutor.main import app


# Test database URL (in-memory SQLite shared through a single connection)
TEST_DATABASE_URL = "sqlite+aiosqlite://"


def gemini_reply(text: str) -> dict[str, Any]:
    """A successful generateContent response body carrying ``text``."""
    return {
        "candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}],
        "usageMetadata": {"promptTokenCount": 10, "candidatesTokenCount": 5, "totalTokenCount": 15},
    }


Reply = Union[httpx.Response, dict, str, Exception, Callable[[httpx.Request], httpx.Response]]


class FakeGemini:
    """
    Scripted stand-in for the generateContent endpoint.

    Queued replies are served in order; once the queue is empty every call
    answers with ``default_text``. Each queued reply may be a response, a
    JSON body, a text to wrap, or an exception to raise from the transport.
    """

    def __init__(self, default_text: str = "Here is a helpful explanation."):
        self.default_text = default_text
        self.replies: list[Reply] = []
        self.requests: list[httpx.Request] = []

    def queue(self, *replies: Reply) -> None:
        self.replies.extend(replies)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        reply = self.replies.pop(0) if self.replies else self.default_text
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, httpx.Response):
            return reply
        if callable(reply):
            return reply(request)
        if isinstance(reply, str):
            reply = gemini_reply(reply)
        return httpx.Response(200, json=reply)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self, api_key: Optional[str] = "test-key") -> GeminiClient:
        return GeminiClient(api_key=api_key, transport=self.transport())

    def last_body(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def gemini() -> FakeGemini:
    return FakeGemini()


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with session_maker() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession, gemini: FakeGemini) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database and model endpoint overrides."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_gateway] = lambda: CompletionGateway(gemini.client())
    app.dependency_overrides[get_question_generator] = lambda: QuestionSetGenerator(gemini.client())

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Identity header forwarded by the upstream auth service."""
    return {"X-User-Id": "learner-1"}


@pytest.fixture
def other_user_headers() -> dict[str, str]:
    return {"X-User-Id": "learner-2"}
