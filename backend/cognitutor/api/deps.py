"""
CogniTutor - API Dependencies
Caller identity and service wiring for FastAPI routes
"""
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from cognitutor.ai.core.llm import CompletionGateway, get_completion_gateway
from cognitutor.ai.document_extractor import DocumentExtractor, document_extractor
from cognitutor.ai.question_generator import QuestionSetGenerator, question_generator
from cognitutor.core.database import get_db


async def get_current_user_id(
    x_user_id: Annotated[Optional[str], Header()] = None,
) -> str:
    """
    Identity of the caller, as forwarded by the upstream authentication service.

    Raises:
        HTTPException: If the identity header is missing
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing user identity",
        )
    return x_user_id.strip()


def get_gateway() -> CompletionGateway:
    return get_completion_gateway()


def get_question_generator() -> QuestionSetGenerator:
    return question_generator


def get_document_extractor() -> DocumentExtractor:
    return document_extractor


# Type aliases for common dependencies
CurrentUserId = Annotated[str, Depends(get_current_user_id)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
Gateway = Annotated[CompletionGateway, Depends(get_gateway)]
Generator = Annotated[QuestionSetGenerator, Depends(get_question_generator)]
Extractor = Annotated[DocumentExtractor, Depends(get_document_extractor)]
