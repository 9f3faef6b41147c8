"""
CogniTutor - Learner Profile Schemas
"""
from datetime import datetime
from typing import Optional
from enum import Enum

from pydantic import BaseModel

from cognitutor.ai.tier_classifier import CognitiveTier


class TestFrequency(str, Enum):
    """How often the learner wants to retake the assessment."""
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    NEVER = "never"


class ProfileResponse(BaseModel):
    """Learner profile with the tier derived from the stored score."""
    user_id: str
    score: Optional[int] = None
    has_completed_assessment: bool
    tier: Optional[CognitiveTier] = None
    tier_label: Optional[str] = None
    test_frequency: TestFrequency
    last_assessed_at: Optional[datetime] = None


class ProfileUpdateRequest(BaseModel):
    """Learner-editable profile settings."""
    test_frequency: TestFrequency
