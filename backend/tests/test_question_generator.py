"""
CogniTutor - Question Generator Tests
"""
import json

import httpx
import pytest

from cognitutor.ai.fallback_questions import FALLBACK_QUESTIONS, get_fallback_questions
from cognitutor.ai.question_generator import (
    QUESTION_COUNT,
    MalformedStructure,
    QuestionSetGenerator,
    assemble_question_set,
    check_question,
    parse_question_array,
)


def generated_item(n: int, **overrides) -> dict:
    item = {
        "question": f"What is {n} + {n}?",
        "options": [str(2 * n), str(2 * n + 1), str(2 * n + 2), str(2 * n + 3)],
        "correctAnswer": 0,
        "difficulty": "easy",
        "category": "mathematical",
    }
    item.update(overrides)
    return item


def assert_well_formed(questions):
    assert len(questions) == QUESTION_COUNT
    assert [q.id for q in questions] == [f"q_{i}" for i in range(1, QUESTION_COUNT + 1)]
    for q in questions:
        assert len(q.options) == 4
        assert 0 <= q.correct_option_index <= 3
        assert "image" not in q.prompt.lower()


# =============================================================================
# Parsing and validation
# =============================================================================

def test_parse_strips_code_fences():
    text = "Sure!\n```json\n" + json.dumps([generated_item(1)]) + "\n```"
    assert parse_question_array(text) == [generated_item(1)]


@pytest.mark.parametrize("text", ["no json here", "[]", "[1, 2", '{"question": "x"}'])
def test_parse_rejects_unusable_text(text):
    with pytest.raises(MalformedStructure):
        parse_question_array(text)


def test_check_accepts_numeric_options_and_mixed_case_enums():
    raw = generated_item(3, options=[6, 7, 8, 9], difficulty="Hard", category="LOGICAL")
    check = check_question(raw)
    assert check.accepted
    assert check.payload.options == ["6", "7", "8", "9"]
    assert check.payload.difficulty.value == "hard"


@pytest.mark.parametrize(
    "overrides",
    [
        {"options": ["a", "b", "c"]},
        {"correctAnswer": 4},
        {"difficulty": "impossible"},
        {"question": ""},
        {"question": "Which image shows a cube?"},
        {"options": ["[image of a cat]", "b", "c", "d"]},
    ],
)
def test_check_rejects_invalid_items(overrides):
    check = check_question(generated_item(1, **overrides))
    assert not check.accepted
    assert check.rejection


def test_assemble_pads_and_renumbers():
    accepted = [check_question(generated_item(n)).payload for n in range(1, 6)]
    questions = assemble_question_set(accepted)

    assert_well_formed(questions)
    assert questions[0].prompt == "What is 1 + 1?"
    assert questions[5].prompt == FALLBACK_QUESTIONS[0].prompt


def test_assemble_drops_duplicate_prompts():
    payload = check_question(generated_item(1)).payload
    questions = assemble_question_set([payload, payload])
    prompts = [q.prompt for q in questions]
    assert prompts.count("What is 1 + 1?") == 1
    assert len(set(prompts)) == QUESTION_COUNT


def test_assemble_skips_fallback_already_generated():
    duplicate = check_question({
        "question": FALLBACK_QUESTIONS[0].prompt,
        "options": list(FALLBACK_QUESTIONS[0].options),
        "correctAnswer": FALLBACK_QUESTIONS[0].correct_option_index,
        "difficulty": "medium",
        "category": "mathematical",
    }).payload
    questions = assemble_question_set([duplicate])
    assert_well_formed(questions)
    assert len({q.prompt for q in questions}) == QUESTION_COUNT


def test_fallback_bank_is_well_formed():
    questions = get_fallback_questions()
    assert_well_formed(questions)
    questions.pop()
    assert len(FALLBACK_QUESTIONS) == QUESTION_COUNT


# =============================================================================
# Generation
# =============================================================================

@pytest.mark.asyncio
async def test_garbage_response_uses_fallback(gemini):
    gemini.queue("I cannot help with that.")
    questions = await QuestionSetGenerator(gemini.client()).generate()
    assert questions == get_fallback_questions()


@pytest.mark.asyncio
async def test_transport_failure_uses_fallback(gemini):
    gemini.queue(httpx.Response(429, text="quota"))
    questions = await QuestionSetGenerator(gemini.client()).generate()
    assert questions == get_fallback_questions()


@pytest.mark.asyncio
async def test_missing_candidates_uses_fallback(gemini):
    gemini.queue({})
    questions = await QuestionSetGenerator(gemini.client()).generate()
    assert questions == get_fallback_questions()
    assert len(gemini.requests) == 1


@pytest.mark.asyncio
async def test_missing_api_key_uses_fallback(gemini):
    questions = await QuestionSetGenerator(gemini.client(api_key="")).generate()
    assert questions == get_fallback_questions()
    assert gemini.requests == []


@pytest.mark.asyncio
async def test_partial_generation_is_padded(gemini):
    items = [generated_item(n) for n in range(1, 6)]
    items.append(generated_item(99, question="Look at the image below"))
    gemini.queue("```json\n" + json.dumps(items) + "\n```")

    questions = await QuestionSetGenerator(gemini.client()).generate()

    assert_well_formed(questions)
    assert [q.prompt for q in questions[:5]] == [f"What is {n} + {n}?" for n in range(1, 6)]
    assert questions[5].prompt == FALLBACK_QUESTIONS[0].prompt
    assert gemini.last_body()["generationConfig"]["maxOutputTokens"] == 2048


@pytest.mark.asyncio
async def test_full_generation_truncated_to_count(gemini):
    gemini.queue(json.dumps([generated_item(n) for n in range(1, 26)]))
    questions = await QuestionSetGenerator(gemini.client()).generate()
    assert_well_formed(questions)
    assert questions[-1].prompt == "What is 20 + 20?"
