"""
CogniTutor - Assessment Scorer Tests
"""
import pytest

from cognitutor.ai.fallback_questions import get_fallback_questions
from cognitutor.ai.scorer import score_assessment
from cognitutor.ai.tier_classifier import CognitiveTier


def correct_answers(questions):
    return [q.correct_option_index for q in questions]


def wrong_answer(question):
    return (question.correct_option_index + 1) % 4


def test_fifteen_of_twenty_scores_150():
    questions = get_fallback_questions()
    answers = correct_answers(questions)
    for i in range(5):
        answers[i] = wrong_answer(questions[i])

    result = score_assessment(answers, questions, time_spent_seconds=600)

    assert result.correct_count == 15
    assert result.total_questions == 20
    assert result.score == 150
    assert result.time_spent_seconds == 600
    assert result.profile.tier == CognitiveTier.HIGH


def test_all_correct_scores_200():
    questions = get_fallback_questions()
    result = score_assessment(correct_answers(questions), questions)
    assert result.score == 200


def test_no_answers_scores_zero():
    questions = get_fallback_questions()
    result = score_assessment([], questions)
    assert result.score == 0
    assert result.correct_count == 0


def test_unanswered_questions_count_as_wrong():
    questions = get_fallback_questions()[:4]
    answers = [questions[0].correct_option_index, None, None, questions[3].correct_option_index]
    result = score_assessment(answers, questions)
    assert result.correct_count == 2
    assert result.score == 100


def test_score_rounds_half_up():
    # 1 of 3 correct is 66.67
    questions = get_fallback_questions()[:3]
    answers = [questions[0].correct_option_index, None, None]
    assert score_assessment(answers, questions).score == 67


def test_time_spent_is_clamped():
    questions = get_fallback_questions()
    result = score_assessment([], questions, time_spent_seconds=99999)
    assert result.time_spent_seconds == 1800


def test_empty_question_list_is_rejected():
    with pytest.raises(ValueError):
        score_assessment([], [])
