"""
CogniTutor - Assessment API Router
Question set generation, submission scoring and result history
"""
from typing import List

from fastapi import APIRouter, HTTPException, Query, status

from cognitutor.api.deps import CurrentUserId, DbSession, Generator
from cognitutor.ai.tier_classifier import classify_tier
from cognitutor.core.config import settings
from cognitutor.models.assessment import AssessmentRecord
from cognitutor.schemas.assessment import (
    AssessmentQuestionsResponse,
    AssessmentResultResponse,
    AssessmentSubmitRequest,
    QuestionView,
)
from cognitutor.services.assessment import (
    AssessmentAlreadySubmitted,
    AssessmentNotFound,
    AssessmentService,
)
from cognitutor.services.profile import ProfileService


router = APIRouter(prefix="/assessments", tags=["Assessment"])


def to_result_response(record: AssessmentRecord) -> AssessmentResultResponse:
    profile = classify_tier(record.score)
    return AssessmentResultResponse(
        id=record.id,
        score=record.score,
        total_questions=record.total_questions,
        correct_count=record.correct_count,
        time_spent_seconds=record.time_spent_seconds,
        completed_at=record.completed_at,
        tier=profile.tier,
        tier_label=profile.tier_label,
    )


@router.post("/generate", response_model=AssessmentQuestionsResponse)
async def generate_assessment(user_id: CurrentUserId, db: DbSession, generator: Generator):
    """
    Generate a fresh set of 20 assessment questions.

    Always succeeds: when the model is unavailable or its output is unusable
    the curated fallback set is returned. Answer keys stay on the server.
    """
    questions = await generator.generate()
    issued = await AssessmentService(db).issue(user_id, questions)
    return AssessmentQuestionsResponse(
        assessment_id=issued.id,
        time_limit_seconds=settings.ASSESSMENT_TIME_LIMIT_SECONDS,
        questions=[QuestionView.model_validate(q.model_dump()) for q in questions],
    )


@router.post("/submit", response_model=AssessmentResultResponse)
async def submit_assessment(
    request: AssessmentSubmitRequest,
    user_id: CurrentUserId,
    db: DbSession,
):
    """Score the answers for an issued set and store the result as the learner's current score."""
    try:
        record = await AssessmentService(db).submit(
            user_id, request.assessment_id, request.answers, request.time_spent_seconds
        )
    except AssessmentNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Assessment not found",
        )
    except AssessmentAlreadySubmitted:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Assessment already submitted",
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )
    return to_result_response(record)


@router.get("/results", response_model=List[AssessmentResultResponse])
async def list_results(
    user_id: CurrentUserId,
    db: DbSession,
    limit: int = Query(20, ge=1, le=100),
):
    """The caller's assessment results, newest first."""
    records = await ProfileService(db).list_results(user_id, limit=limit)
    return [to_result_response(r) for r in records]
