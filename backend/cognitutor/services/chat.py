"""
CogniTutor - Chat Service
Session aggregate operations: turns, titles and attached documents.
"""
import asyncio
import logging
import uuid
import weakref
from typing import List, Optional, Tuple

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from cognitutor.ai.core.llm import CompletionGateway
from cognitutor.ai.document_extractor import cap_content
from cognitutor.ai.prompt_composer import build_document_context
from cognitutor.ai.tutor_chat import send_chat_turn
from cognitutor.models.chat import ChatSession, ChatTurn, SessionDocument, utcnow
from cognitutor.schemas.chat import ChatRole, ConversationTurn

logger = logging.getLogger(__name__)


DEFAULT_SESSION_TITLE = "New Chat"
TITLE_MAX_CHARS = 50

# One in-flight send per session within this process. Entries disappear once
# no send holds or awaits the lock.
_session_locks: "weakref.WeakValueDictionary[uuid.UUID, asyncio.Lock]" = weakref.WeakValueDictionary()


def session_lock(session_id: uuid.UUID) -> asyncio.Lock:
    lock = _session_locks.get(session_id)
    if lock is None:
        lock = asyncio.Lock()
        _session_locks[session_id] = lock
    return lock


class SessionNotFound(Exception):
    """The session does not exist or belongs to another user."""


class DocumentNotFound(Exception):
    """The document is not attached to the session."""


def derive_title(first_message: str) -> str:
    """Session title from the first user message: 50 characters, ellipsis if cut."""
    text = first_message.strip()
    if len(text) > TITLE_MAX_CHARS:
        return text[:TITLE_MAX_CHARS] + "..."
    return text


class ChatService:
    def __init__(self, db: AsyncSession, gateway: Optional[CompletionGateway] = None):
        self.db = db
        self.gateway = gateway

    async def create_session(self, user_id: str) -> ChatSession:
        """Create a new, empty chat session."""
        session = ChatSession(user_id=user_id, title=DEFAULT_SESSION_TITLE, turns=[], documents=[])
        self.db.add(session)
        await self.db.commit()
        return session

    async def list_sessions(self, user_id: str, limit: int = 50) -> List[ChatSession]:
        """Get a user's sessions, most recently updated first."""
        result = await self.db.execute(
            select(ChatSession)
            .where(ChatSession.user_id == user_id)
            .order_by(desc(ChatSession.updated_at))
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_session(self, session_id: uuid.UUID, user_id: str) -> ChatSession:
        """Fetch a session with its turns and documents, enforcing ownership."""
        result = await self.db.execute(
            select(ChatSession)
            .options(selectinload(ChatSession.turns), selectinload(ChatSession.documents))
            .where(ChatSession.id == session_id)
        )
        session = result.scalar_one_or_none()
        if session is None or session.user_id != user_id:
            raise SessionNotFound(str(session_id))
        return session

    async def delete_session(self, session_id: uuid.UUID, user_id: str) -> None:
        session = await self.get_session(session_id, user_id)
        await self.db.delete(session)
        await self.db.commit()
        _session_locks.pop(session_id, None)

    async def send_message(
        self,
        session_id: uuid.UUID,
        user_id: str,
        text: str,
        score: int,
    ) -> Tuple[ChatTurn, ChatTurn]:
        """
        Append a user turn, get the tutor's reply and append it.

        The stored user turn holds the trimmed text; the model additionally sees
        the session's documents appended as reference material.

        Returns:
            The (user_turn, assistant_turn) pair.

        Raises:
            ValueError: the text is blank once surrounding whitespace is removed.
        """
        text = text.strip()
        if not text:
            raise ValueError("message must not be blank")

        async with session_lock(session_id):
            session = await self.get_session(session_id, user_id)
            prior_turns = [ConversationTurn.model_validate(turn) for turn in session.turns]
            documents = list(session.documents)

            if not session.turns:
                session.title = derive_title(text)

            user_turn = self._append_turn(session, ChatRole.USER, text)
            await self.db.commit()

            reply = await send_chat_turn(
                prior_turns,
                text + build_document_context(documents),
                score,
                has_documents=bool(documents),
                gateway=self.gateway,
            )

            assistant_turn = self._append_turn(session, ChatRole.ASSISTANT, reply)
            await self.db.commit()

        return user_turn, assistant_turn

    async def attach_document(
        self,
        session_id: uuid.UUID,
        user_id: str,
        name: str,
        content: str,
        mime_type: Optional[str] = None,
    ) -> SessionDocument:
        """Attach extracted text to a session, capped to the context budget."""
        session = await self.get_session(session_id, user_id)
        document = SessionDocument(
            name=name,
            content=cap_content(content),
            mime_type=mime_type or "application/octet-stream",
            uploaded_at=utcnow(),
        )
        session.documents.append(document)
        session.updated_at = utcnow()
        await self.db.commit()
        logger.info(f"Attached document {name!r} to session {session_id} ({document.content_length} chars)")
        return document

    async def remove_document(self, session_id: uuid.UUID, user_id: str, document_id: uuid.UUID) -> None:
        session = await self.get_session(session_id, user_id)
        document = next((d for d in session.documents if d.id == document_id), None)
        if document is None:
            raise DocumentNotFound(str(document_id))
        session.documents.remove(document)
        session.updated_at = utcnow()
        await self.db.commit()

    @staticmethod
    def _append_turn(session: ChatSession, role: ChatRole, content: str) -> ChatTurn:
        now = utcnow()
        turn = ChatTurn(
            position=len(session.turns),
            role=role.value,
            content=content,
            created_at=now,
        )
        session.turns.append(turn)
        session.updated_at = now
        return turn
