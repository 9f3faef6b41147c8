"""
CogniTutor - Assessment Service
Issues generated question sets and scores submissions against the stored keys.
"""
import logging
import uuid
from typing import List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from cognitutor.ai.scorer import score_assessment
from cognitutor.models.assessment import AssessmentRecord, IssuedAssessment
from cognitutor.models.chat import utcnow
from cognitutor.schemas.assessment import AssessmentQuestion
from cognitutor.services.profile import ProfileService

logger = logging.getLogger(__name__)


class AssessmentNotFound(Exception):
    """No issued assessment with this id belongs to the learner."""


class AssessmentAlreadySubmitted(Exception):
    """The issued assessment has already been scored."""


class AssessmentService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def issue(self, user_id: str, questions: Sequence[AssessmentQuestion]) -> IssuedAssessment:
        """Store a question set, answer keys included, for a later submission."""
        issued = IssuedAssessment(
            user_id=user_id,
            questions=[q.model_dump(mode="json") for q in questions],
            issued_at=utcnow(),
        )
        self.db.add(issued)
        await self.db.commit()
        return issued

    async def submit(
        self,
        user_id: str,
        assessment_id: uuid.UUID,
        answers: Sequence[Optional[int]],
        time_spent_seconds: int = 0,
    ) -> AssessmentRecord:
        """
        Score answers against an issued set and record the result.

        Raises:
            AssessmentNotFound: unknown id, or issued to another learner.
            AssessmentAlreadySubmitted: the set was scored before.
            ValueError: the stored set holds no questions.
        """
        issued = await self.db.get(IssuedAssessment, assessment_id)
        if issued is None or issued.user_id != user_id:
            raise AssessmentNotFound(str(assessment_id))
        if issued.submitted_at is not None:
            raise AssessmentAlreadySubmitted(str(assessment_id))

        questions: List[AssessmentQuestion] = [
            AssessmentQuestion.model_validate(q) for q in issued.questions
        ]
        result = score_assessment(answers, questions, time_spent_seconds)

        issued.submitted_at = utcnow()
        record = await ProfileService(self.db).record_result(user_id, result)
        logger.info(
            f"Assessment {assessment_id} scored for {user_id}: "
            f"{result.correct_count}/{result.total_questions} -> {result.score} ({result.profile.tier.value})"
        )
        return record
