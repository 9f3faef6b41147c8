"""
CogniTutor - Assessment Models
Stored results of submitted assessments
"""
import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from cognitutor.core.database import Base
from cognitutor.models.chat import utcnow


class AssessmentRecord(Base):
    """Result of one assessment submission. Never updated after insert."""

    __tablename__ = "assessment_results"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(128), index=True)

    # Score details
    score: Mapped[int] = mapped_column(Integer)  # 0 to 200
    total_questions: Mapped[int] = mapped_column(Integer)
    correct_count: Mapped[int] = mapped_column(Integer)
    time_spent_seconds: Mapped[int] = mapped_column(Integer, default=0)

    completed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class IssuedAssessment(Base):
    """
    A generated question set handed to a learner, answer keys included.
    Submissions are scored against this copy, never against client data.
    """

    __tablename__ = "issued_assessments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(128), index=True)
    questions: Mapped[list] = mapped_column(JSON)

    issued_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
