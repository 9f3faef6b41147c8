"""
CogniTutor - Assessment Scorer
"""
import math
from typing import Optional, Sequence

from cognitutor.core.config import settings
from cognitutor.schemas.assessment import AssessmentQuestion, AssessmentResult

MAX_SCORE = 200


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def score_assessment(
    answers: Sequence[Optional[int]],
    questions: Sequence[AssessmentQuestion],
    time_spent_seconds: int = 0,
) -> AssessmentResult:
    """
    Score answers against their questions on a 0-200 scale.

    answers[i] is the selected option index for questions[i], or None when
    unanswered. Missing trailing answers count as unanswered.

    Raises:
        ValueError: if questions is empty; callers must supply at least one.
    """
    if not questions:
        raise ValueError("cannot score an assessment with no questions")

    correct = sum(
        1
        for index, question in enumerate(questions)
        if index < len(answers)
        and answers[index] is not None
        and answers[index] == question.correct_option_index
    )
    total = len(questions)
    elapsed = min(max(int(time_spent_seconds), 0), settings.ASSESSMENT_TIME_LIMIT_SECONDS)

    return AssessmentResult(
        score=_round_half_up(correct / total * MAX_SCORE),
        total_questions=total,
        correct_count=correct,
        time_spent_seconds=elapsed,
    )
