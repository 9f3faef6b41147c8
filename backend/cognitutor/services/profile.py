"""
CogniTutor - Learner Profile Service
Profile lookups, settings and assessment result recording.
"""
from typing import List

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from cognitutor.models.assessment import AssessmentRecord
from cognitutor.models.chat import utcnow
from cognitutor.models.profile import LearnerProfile
from cognitutor.schemas.assessment import AssessmentResult


class AssessmentRequired(Exception):
    """The learner has no assessment score yet."""


class ProfileService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_or_create(self, user_id: str) -> LearnerProfile:
        profile = await self.db.get(LearnerProfile, user_id)
        if profile is None:
            profile = LearnerProfile(
                user_id=user_id,
                has_completed_assessment=False,
                test_frequency="monthly",
            )
            self.db.add(profile)
            await self.db.commit()
        return profile

    async def require_score(self, user_id: str) -> int:
        """
        Return the learner's score.

        Raises:
            AssessmentRequired: the learner has not completed the assessment.
        """
        profile = await self.db.get(LearnerProfile, user_id)
        if profile is None or not profile.has_completed_assessment or profile.score is None:
            raise AssessmentRequired(user_id)
        return profile.score

    async def update_settings(self, user_id: str, test_frequency: str) -> LearnerProfile:
        profile = await self.get_or_create(user_id)
        profile.test_frequency = test_frequency
        profile.updated_at = utcnow()
        await self.db.commit()
        return profile

    async def record_result(self, user_id: str, result: AssessmentResult) -> AssessmentRecord:
        """Store a scored assessment and make its score the learner's current one."""
        now = utcnow()
        record = AssessmentRecord(
            user_id=user_id,
            score=result.score,
            total_questions=result.total_questions,
            correct_count=result.correct_count,
            time_spent_seconds=result.time_spent_seconds,
            completed_at=now,
        )
        self.db.add(record)

        profile = await self.get_or_create(user_id)
        profile.score = result.score
        profile.has_completed_assessment = True
        profile.last_assessed_at = now
        profile.updated_at = now

        await self.db.commit()
        return record

    async def list_results(self, user_id: str, limit: int = 20) -> List[AssessmentRecord]:
        """Get a learner's results, newest first."""
        result = await self.db.execute(
            select(AssessmentRecord)
            .where(AssessmentRecord.user_id == user_id)
            .order_by(desc(AssessmentRecord.completed_at))
            .limit(limit)
        )
        return list(result.scalars().all())
