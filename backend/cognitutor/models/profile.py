"""
CogniTutor - Learner Profile Model
"""
from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from cognitutor.core.database import Base
from cognitutor.models.chat import utcnow


class LearnerProfile(Base):
    """
    Per-user assessment state. The tier is never stored; it is derived
    from ``score`` whenever needed.
    """
    __tablename__ = "learner_profiles"

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    has_completed_assessment: Mapped[bool] = mapped_column(default=False)
    test_frequency: Mapped[str] = mapped_column(String(20), default="monthly")
    last_assessed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
