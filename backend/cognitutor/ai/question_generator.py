"""
CogniTutor - Assessment Question Generator
Generates the 20-question assessment with the LLM, repairs and validates the
returned JSON, and falls back to the static bank when generation fails.
"""
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from cognitutor.ai.core.llm import CompletionError, GeminiClient, get_llm_client
from cognitutor.ai.core.telemetry import agent_span, record_fallback
from cognitutor.ai.fallback_questions import FALLBACK_QUESTIONS, get_fallback_questions
from cognitutor.ai.prompt_composer import QUESTION_GENERATION_CONFIG, compose_single_prompt
from cognitutor.schemas.assessment import (
    OPTIONS_PER_QUESTION,
    AssessmentQuestion,
    QuestionCategory,
    QuestionDifficulty,
)

logger = logging.getLogger(__name__)


QUESTION_COUNT = 20

_CODE_FENCE = re.compile(r"```(?:json)?\s*")


class MalformedStructure(CompletionError):
    """The generated text does not contain a usable JSON array."""
    reason = "malformed_structure"


class GeneratedQuestionPayload(BaseModel):
    """Schema every generated question must satisfy."""
    question: str = Field(min_length=1)
    options: List[str] = Field(min_length=OPTIONS_PER_QUESTION, max_length=OPTIONS_PER_QUESTION)
    correctAnswer: int = Field(ge=0, le=OPTIONS_PER_QUESTION - 1)
    difficulty: QuestionDifficulty
    category: QuestionCategory

    @field_validator("options", mode="before")
    @classmethod
    def stringify_options(cls, value: Any) -> Any:
        # Numeric answers such as 32 are common in sequence questions
        if isinstance(value, list):
            return [str(v) if isinstance(v, (int, float)) and not isinstance(v, bool) else v for v in value]
        return value

    @field_validator("difficulty", "category", mode="before")
    @classmethod
    def lowercase(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    def mentions_image(self) -> bool:
        # "image" also covers the "[image" placeholder marker
        texts = [self.question, *self.options]
        return any("image" in text.lower() for text in texts)


@dataclass(frozen=True)
class QuestionCheck:
    """Validation outcome for one generated element: a payload or a rejection reason."""
    payload: Optional[GeneratedQuestionPayload] = None
    rejection: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.payload is not None


def strip_code_fences(text: str) -> str:
    """Remove Markdown code fence markers (```json and ```)."""
    return _CODE_FENCE.sub("", text)


def parse_question_array(text: str) -> List[Any]:
    """
    Extract and parse the JSON array embedded in generated text.

    Raises:
        MalformedStructure: no bracketed array, invalid JSON, or an empty/non-list result.
    """
    cleaned = strip_code_fences(text)
    start = cleaned.find("[")
    end = cleaned.rfind("]")
    if start == -1 or end == -1 or start >= end:
        raise MalformedStructure("could not find a JSON array in the response")

    try:
        parsed = json.loads(cleaned[start:end + 1])
    except ValueError as e:
        raise MalformedStructure(f"invalid JSON array: {e}") from e

    if not isinstance(parsed, list) or not parsed:
        raise MalformedStructure("response array is empty or not a list")
    return parsed


def check_question(raw: Any) -> QuestionCheck:
    """Validate one generated element against the question schema."""
    if not isinstance(raw, dict):
        return QuestionCheck(rejection="not an object")
    try:
        payload = GeneratedQuestionPayload.model_validate(raw)
    except ValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        return QuestionCheck(rejection=f"invalid fields: {', '.join(fields)}")
    if payload.mentions_image():
        return QuestionCheck(rejection="references an image")
    return QuestionCheck(payload=payload)


def _prompt_key(prompt: str) -> str:
    return " ".join(prompt.lower().split())


def assemble_question_set(
    accepted: Iterable[GeneratedQuestionPayload],
    count: int = QUESTION_COUNT,
) -> List[AssessmentQuestion]:
    """
    Build exactly ``count`` questions from accepted payloads.

    Duplicate prompts are dropped, the set is padded from the front of the
    fallback bank (skipping prompts already present), and identifiers are
    reassigned as q_1..q_<count>.
    """
    selected: List[AssessmentQuestion] = []
    seen = set()

    for payload in accepted:
        key = _prompt_key(payload.question)
        if key in seen:
            continue
        seen.add(key)
        selected.append(AssessmentQuestion(
            id=f"q_{len(selected) + 1}",
            prompt=payload.question,
            options=tuple(payload.options),
            correct_option_index=payload.correctAnswer,
            difficulty=payload.difficulty,
            category=payload.category,
        ))
        if len(selected) == count:
            break

    generated = len(selected)
    for fallback in FALLBACK_QUESTIONS:
        if len(selected) == count:
            break
        key = _prompt_key(fallback.prompt)
        if key in seen:
            continue
        seen.add(key)
        selected.append(fallback)

    if generated < count:
        logger.info(f"Padded question set with {len(selected) - generated} fallback questions")

    return [
        question.model_copy(update={"id": f"q_{index}"})
        for index, question in enumerate(selected, start=1)
    ]


class QuestionSetGenerator:
    """Generate the assessment question set; never raises to callers."""

    PROMPT = f"""Generate exactly {QUESTION_COUNT} IQ test questions in valid JSON format. Each question should follow this exact structure:

[
  {{
    "question": "What comes next in the sequence: 2, 4, 8, 16, ?",
    "options": ["24", "32", "30", "28"],
    "correctAnswer": 1,
    "difficulty": "medium",
    "category": "mathematical"
  }}
]

Requirements:
- Mix of categories: logical, mathematical, verbal, spatial
- Mix of difficulties: easy, medium, hard
- Exactly 4 options per question
- correctAnswer should be the index (0-3) of the correct option
- Return ONLY the JSON array, no additional text or explanations
- Ensure all {QUESTION_COUNT} questions are unique and test different cognitive abilities
- Do not include image-based questions or references to images
- Make sure all questions can be answered with text only"""

    def __init__(self, client: Optional[GeminiClient] = None):
        self._client = client

    @property
    def client(self) -> GeminiClient:
        if self._client is None:
            self._client = get_llm_client()
        return self._client

    async def generate(self) -> List[AssessmentQuestion]:
        """Return exactly QUESTION_COUNT questions, generated where possible."""
        with agent_span("generate_questions", "QuestionSetGenerator") as span:
            payload = compose_single_prompt(self.PROMPT, QUESTION_GENERATION_CONFIG)
            try:
                text = await self.client.generate_text(payload, operation="llm.generate_questions")
                logger.debug("Generated question text: %s", text)
                raw_items = parse_question_array(text)
            except CompletionError as e:
                return self._fallback(e.reason, str(e))
            except Exception as e:
                logger.exception("Unexpected error while generating questions")
                return self._fallback("unexpected_error", str(e))

            checks = [check_question(item) for item in raw_items]
            accepted = [check.payload for check in checks if check.accepted]
            for index, check in enumerate(checks):
                if not check.accepted:
                    logger.info(f"Rejected generated question #{index + 1}: {check.rejection}")

            questions = assemble_question_set(accepted)

            span.set_attribute("questions.received", len(raw_items))
            span.set_attribute("questions.accepted", len(accepted))
            span.set_attribute("questions.rejected", len(checks) - len(accepted))
            logger.info(
                "Generated question set (received: %d, accepted: %d)",
                len(raw_items), len(accepted),
            )
            return questions

    @staticmethod
    def _fallback(reason: str, detail: str) -> List[AssessmentQuestion]:
        record_fallback(reason, "question_generation")
        logger.warning(
            "Question generation fell back to static bank (%s): %s",
            reason,
            detail,
            extra={"fallback_reason": reason},
        )
        return get_fallback_questions()


# Singleton instance
question_generator = QuestionSetGenerator()
