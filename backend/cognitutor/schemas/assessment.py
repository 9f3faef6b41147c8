"""
CogniTutor - Assessment Schemas
Pydantic schemas for assessment questions, submissions and results
"""
import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cognitutor.ai.tier_classifier import CognitiveProfile, CognitiveTier, classify_tier


OPTIONS_PER_QUESTION = 4


class QuestionDifficulty(str, Enum):
    """Difficulty levels for questions."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class QuestionCategory(str, Enum):
    """Cognitive area a question exercises."""
    LOGICAL = "logical"
    MATHEMATICAL = "mathematical"
    VERBAL = "verbal"
    SPATIAL = "spatial"


class AssessmentQuestion(BaseModel):
    """A single multiple-choice assessment question. Immutable once generated."""
    model_config = ConfigDict(frozen=True)

    id: str
    prompt: str = Field(min_length=1)
    options: tuple[str, str, str, str]
    correct_option_index: int = Field(ge=0, le=OPTIONS_PER_QUESTION - 1)
    difficulty: QuestionDifficulty
    category: QuestionCategory


class AssessmentResult(BaseModel):
    """Outcome of one submitted assessment. Never mutated."""
    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0, le=200)
    total_questions: int = Field(ge=1)
    correct_count: int = Field(ge=0)
    time_spent_seconds: int = Field(default=0, ge=0)

    @property
    def profile(self) -> CognitiveProfile:
        return classify_tier(self.score)


# ============================================================================
# Request/Response Schemas
# ============================================================================

class QuestionView(BaseModel):
    """An assessment question as shown to the learner, without its answer key."""
    id: str
    prompt: str
    options: tuple[str, str, str, str]
    difficulty: QuestionDifficulty
    category: QuestionCategory


class AssessmentQuestionsResponse(BaseModel):
    """Generated question set, identified for submission."""
    assessment_id: uuid.UUID
    time_limit_seconds: int
    questions: list[QuestionView]


class AssessmentSubmitRequest(BaseModel):
    """Answers for an issued question set; None marks an unanswered question."""
    assessment_id: uuid.UUID
    answers: list[Optional[int]] = Field(default_factory=list)
    time_spent_seconds: int = Field(default=0, ge=0)

    @field_validator("answers")
    @classmethod
    def answers_in_range(cls, answers: list[Optional[int]]) -> list[Optional[int]]:
        for answer in answers:
            if answer is not None and not 0 <= answer < OPTIONS_PER_QUESTION:
                raise ValueError(f"answer index out of range: {answer}")
        return answers


class AssessmentResultResponse(BaseModel):
    """Stored assessment result with the derived tier."""
    id: uuid.UUID
    score: int
    total_questions: int
    correct_count: int
    time_spent_seconds: int
    completed_at: datetime
    tier: CognitiveTier
    tier_label: str
