"""
CogniTutor - Chat API Router
Endpoints for tutor chat sessions, messages and attached documents
"""
import uuid
from typing import List

from fastapi import APIRouter, File, HTTPException, Query, UploadFile, status

from cognitutor.api.deps import CurrentUserId, DbSession, Extractor, Gateway
from cognitutor.api.v1.documents import extract_upload
from cognitutor.models.chat import ChatSession
from cognitutor.schemas.chat import (
    ConversationTurn,
    DocumentResponse,
    DocumentSummary,
    SendMessageRequest,
    SendMessageResponse,
    SessionDetail,
    SessionSummary,
)
from cognitutor.services.chat import ChatService, DocumentNotFound, SessionNotFound
from cognitutor.services.profile import AssessmentRequired, ProfileService


router = APIRouter(prefix="/chat", tags=["Chat"])


def session_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Chat session not found",
    )


def to_summary(session: ChatSession) -> SessionSummary:
    return SessionSummary(
        id=session.id,
        title=session.title,
        created_at=session.created_at,
        updated_at=session.updated_at,
    )


def to_detail(session: ChatSession) -> SessionDetail:
    return SessionDetail(
        id=session.id,
        title=session.title,
        created_at=session.created_at,
        updated_at=session.updated_at,
        turns=[ConversationTurn.model_validate(turn) for turn in session.turns],
        documents=[DocumentSummary.model_validate(doc) for doc in session.documents],
    )


# ============================================================================
# Session Endpoints
# ============================================================================

@router.post("/sessions", response_model=SessionSummary, status_code=status.HTTP_201_CREATED)
async def create_session(user_id: CurrentUserId, db: DbSession):
    """Start a new, empty chat session."""
    session = await ChatService(db).create_session(user_id)
    return to_summary(session)


@router.get("/sessions", response_model=List[SessionSummary])
async def list_sessions(user_id: CurrentUserId, db: DbSession, limit: int = Query(50, ge=1, le=100)):
    """List the caller's sessions, most recently updated first."""
    sessions = await ChatService(db).list_sessions(user_id, limit=limit)
    return [to_summary(s) for s in sessions]


@router.get("/sessions/{session_id}", response_model=SessionDetail)
async def get_session(session_id: uuid.UUID, user_id: CurrentUserId, db: DbSession):
    """Get a session with its full turn history and attached documents."""
    try:
        session = await ChatService(db).get_session(session_id, user_id)
    except SessionNotFound:
        raise session_not_found()
    return to_detail(session)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: uuid.UUID, user_id: CurrentUserId, db: DbSession):
    """Delete a session together with its turns and documents."""
    try:
        await ChatService(db).delete_session(session_id, user_id)
    except SessionNotFound:
        raise session_not_found()


# ============================================================================
# Message Endpoints
# ============================================================================

@router.post("/sessions/{session_id}/messages", response_model=SendMessageResponse)
async def send_message(
    session_id: uuid.UUID,
    request: SendMessageRequest,
    user_id: CurrentUserId,
    db: DbSession,
    gateway: Gateway,
):
    """
    Send a message to the tutor and get its reply.

    The reply is adapted to the caller's cognitive tier, so an assessment
    must have been completed first. Model failures never surface as errors;
    the tutor answers with a fixed apology instead.
    """
    try:
        score = await ProfileService(db).require_score(user_id)
    except AssessmentRequired:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Complete the cognitive assessment before chatting",
        )

    service = ChatService(db, gateway=gateway)
    try:
        user_turn, assistant_turn = await service.send_message(
            session_id, user_id, request.message, score
        )
        session = await service.get_session(session_id, user_id)
    except SessionNotFound:
        raise session_not_found()

    return SendMessageResponse(
        session_id=session.id,
        title=session.title,
        user_turn=ConversationTurn.model_validate(user_turn),
        assistant_turn=ConversationTurn.model_validate(assistant_turn),
    )


# ============================================================================
# Document Endpoints
# ============================================================================

@router.post(
    "/sessions/{session_id}/documents",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def attach_document(
    session_id: uuid.UUID,
    user_id: CurrentUserId,
    db: DbSession,
    extractor: Extractor,
    file: UploadFile = File(...),
):
    """Upload a document and attach its extracted text to the session."""
    service = ChatService(db)
    # Ownership is checked before spending time on extraction
    try:
        await service.get_session(session_id, user_id)
    except SessionNotFound:
        raise session_not_found()

    name, text, mime_type = await extract_upload(file, extractor)

    try:
        document = await service.attach_document(session_id, user_id, name, text, mime_type)
    except SessionNotFound:
        raise session_not_found()
    return DocumentResponse.model_validate(document)


@router.delete(
    "/sessions/{session_id}/documents/{document_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def remove_document(
    session_id: uuid.UUID,
    document_id: uuid.UUID,
    user_id: CurrentUserId,
    db: DbSession,
):
    """Detach a document from the session."""
    try:
        await ChatService(db).remove_document(session_id, user_id, document_id)
    except SessionNotFound:
        raise session_not_found()
    except DocumentNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found",
        )
