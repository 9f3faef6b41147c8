"""
CogniTutor - Chat Schemas
Pydantic schemas for chat sessions, turns and attached documents
"""
import uuid
from datetime import datetime, timezone
from typing import Optional
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ChatRole(str, Enum):
    """Role in the conversation."""
    USER = "user"
    ASSISTANT = "assistant"


class ConversationTurn(BaseModel):
    """A single chat turn. Immutable once created."""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: Optional[uuid.UUID] = None
    role: ChatRole
    content: str
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        validation_alias=AliasChoices("timestamp", "created_at"),
    )


class DocumentSummary(BaseModel):
    """Document attached to a chat session, without its content."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    mime_type: str
    uploaded_at: datetime
    content_length: int


class DocumentResponse(DocumentSummary):
    """Document attached to a chat session, including extracted content."""
    content: str


class ExtractedTextResponse(BaseModel):
    """Normalized text extracted from an uploaded file."""
    name: str
    content: str


# ============================================================================
# Request/Response Schemas
# ============================================================================

class SendMessageRequest(BaseModel):
    """Request to send a message in a chat session. Surrounding whitespace is dropped."""
    model_config = ConfigDict(str_strip_whitespace=True)

    message: str = Field(min_length=1, max_length=8000)


class SessionSummary(BaseModel):
    """Chat session as shown in the session list."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    created_at: datetime
    updated_at: datetime


class SessionDetail(SessionSummary):
    """Chat session with its ordered turns and attached documents."""
    turns: list[ConversationTurn]
    documents: list[DocumentSummary]


class SendMessageResponse(BaseModel):
    """The appended user turn and the assistant reply."""
    session_id: uuid.UUID
    title: str
    user_turn: ConversationTurn
    assistant_turn: ConversationTurn
