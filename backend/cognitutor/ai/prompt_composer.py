"""
CogniTutor - Prompt Composer
Builds the tier-specific system prompt and the generateContent request payload.
"""
from typing import Iterable, List, Literal, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from langchain_core.prompts import PromptTemplate
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cognitutor.ai.tier_classifier import CognitiveProfile, CognitiveTier
from cognitutor.schemas.chat import ChatRole, ConversationTurn


# ============================================================================
# Request payload (generateContent wire shape)
# ============================================================================

class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Part(_CamelModel):
    text: str


class Content(_CamelModel):
    role: Literal["user", "model"]
    parts: List[Part]


class GenerationConfig(_CamelModel):
    """Sampling parameters sent with every request."""
    temperature: float
    top_k: int
    top_p: float
    max_output_tokens: int


class RequestPayload(_CamelModel):
    contents: List[Content] = Field(min_length=1)
    generation_config: GenerationConfig

    def to_request_body(self) -> dict:
        return self.model_dump(by_alias=True)


# Fixed, not user-tunable
CHAT_GENERATION_CONFIG = GenerationConfig(
    temperature=0.7, top_k=40, top_p=0.95, max_output_tokens=1024,
)
QUESTION_GENERATION_CONFIG = GenerationConfig(
    temperature=0.7, top_k=40, top_p=0.95, max_output_tokens=2048,
)


# ============================================================================
# System prompt
# ============================================================================

TIER_DIRECTIVES = {
    CognitiveTier.LOW: (
        "LOW (Below 90 - Extremely Low to Low Average):",
        [
            "Use simple, clear language and avoid jargon",
            "Break down complex concepts into small, manageable steps",
            "Provide concrete examples and real-world applications",
            "Use repetition and reinforcement to aid understanding",
            "Be patient and encouraging, building confidence",
            "Focus on practical, hands-on learning approaches",
            "Use analogies and visual descriptions when possible",
        ],
    ),
    CognitiveTier.MEDIUM: (
        "MEDIUM (90-119 - Average to High Average):",
        [
            "Provide clear, thorough explanations with moderate detail",
            "Balance theoretical concepts with practical applications",
            "Use standard educational language appropriate for general audiences",
            "Offer examples and practice opportunities",
            "Encourage critical thinking with guided questions",
            "Provide structured learning paths with clear objectives",
            "Mix different learning approaches (visual, auditory, kinesthetic)",
        ],
    ),
    CognitiveTier.HIGH: (
        "HIGH (Above 119 - Superior to Very Superior/Gifted):",
        [
            "Use sophisticated language and technical terminology when appropriate",
            "Provide in-depth analysis and theoretical frameworks",
            "Challenge with complex problems and abstract concepts",
            "Encourage independent exploration and research",
            "Offer multiple perspectives and nuanced discussions",
            "Connect concepts across different domains and disciplines",
            "Stimulate creative and innovative thinking",
            "Provide advanced resources and further reading suggestions",
        ],
    ),
}

DOCUMENT_DIRECTIVE = (
    "\n\nIMPORTANT: The user has uploaded documents for this conversation. "
    "The document content is included in their message after 'REFERENCE DOCUMENTS:'. "
    "Use this content to answer questions, provide analysis, explanations, and insights. "
    "Reference specific parts of the documents when helpful and cite the document name "
    "when referencing content."
)

DOCUMENT_CONTEXT_HEADER = "\n\nREFERENCE DOCUMENTS:\n"

SYSTEM_PROMPT_TEMPLATE = PromptTemplate.from_template(
    """You are an AI learning assistant. The user has an assessment score of {score}, which falls in the {tier_label} range ({tier} category).

Tailor your responses to their cognitive level:

{tier_heading}
{tier_directives}

Always be encouraging, supportive, and adapt your teaching style to help the user learn most effectively based on their cognitive profile. Focus on building understanding rather than just providing information.{document_directive}"""
)


def _format_score(score: float) -> str:
    return str(int(score)) if float(score).is_integer() else str(score)


def compose_system_prompt(profile: CognitiveProfile, has_documents: bool) -> str:
    """Render the system instruction for a learner's tier."""
    heading, directives = TIER_DIRECTIVES[profile.tier]
    return SYSTEM_PROMPT_TEMPLATE.format(
        score=_format_score(profile.score),
        tier_label=profile.tier_label,
        tier=profile.tier.value,
        tier_heading=heading,
        tier_directives="\n".join(f"- {directive}" for directive in directives),
        document_directive=DOCUMENT_DIRECTIVE if has_documents else "",
    )


def build_document_context(documents: Iterable) -> str:
    """
    Render attached documents as a reference block appended to the user text.

    Each document needs ``name`` and ``content`` attributes. Returns an empty
    string when there are no documents.
    """
    blocks = [
        f'Document: "{document.name}"\nContent:\n{document.content}\n---'
        for document in documents
    ]
    if not blocks:
        return ""
    return DOCUMENT_CONTEXT_HEADER + "\n\n".join(blocks)


# ============================================================================
# Request composition
# ============================================================================

def turns_to_messages(turns: Sequence[ConversationTurn]) -> List[BaseMessage]:
    """Convert stored turns to chat messages, preserving order."""
    messages: List[BaseMessage] = []
    for turn in turns:
        role = ChatRole(turn.role)
        if role == ChatRole.USER:
            messages.append(HumanMessage(content=turn.content))
        else:
            messages.append(AIMessage(content=turn.content))
    return messages


def _message_to_content(message: BaseMessage) -> Content:
    role = "model" if isinstance(message, AIMessage) else "user"
    return Content(role=role, parts=[Part(text=message.content)])


def compose_request(
    system_prompt: str,
    prior_turns: Sequence[ConversationTurn],
    new_user_text: str,
    config: GenerationConfig = CHAT_GENERATION_CONFIG,
) -> RequestPayload:
    """
    Build the request payload for one chat turn.

    The endpoint has no separate system channel, so the system prompt is sent
    as the first user content, followed by the history and the new user text.
    """
    messages: List[BaseMessage] = [
        HumanMessage(content=system_prompt),
        *turns_to_messages(prior_turns),
        HumanMessage(content=new_user_text),
    ]
    return RequestPayload(
        contents=[_message_to_content(message) for message in messages],
        generation_config=config,
    )


def compose_single_prompt(prompt: str, config: GenerationConfig) -> RequestPayload:
    """Build a one-shot request with no history."""
    return RequestPayload(
        contents=[Content(role="user", parts=[Part(text=prompt)])],
        generation_config=config,
    )
