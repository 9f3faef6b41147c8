"""
CogniTutor - Tutor Chat
Tier-adaptive chat turn: classify the learner, compose the prompt and ask
the completion gateway for a reply.
"""
import logging
from typing import Optional, Sequence

from cognitutor.ai.core.llm import CompletionGateway, get_completion_gateway
from cognitutor.ai.prompt_composer import (
    CHAT_GENERATION_CONFIG,
    compose_request,
    compose_system_prompt,
)
from cognitutor.ai.tier_classifier import classify_tier
from cognitutor.schemas.chat import ConversationTurn

logger = logging.getLogger(__name__)


async def send_chat_turn(
    prior_turns: Sequence[ConversationTurn],
    new_text: str,
    score: float,
    has_documents: bool,
    gateway: Optional[CompletionGateway] = None,
) -> str:
    """
    Produce the assistant reply for one user turn.

    Args:
        prior_turns: Conversation so far, oldest first, excluding new_text.
        new_text: The new user text, with any document context already appended.
        score: The learner's assessment score.
        has_documents: Whether reference documents are attached to the session.
        gateway: Completion gateway; the default instance when omitted.

    Returns:
        The model's reply, or one of the fixed fallback replies. Never raises.
    """
    gateway = gateway or get_completion_gateway()
    profile = classify_tier(score)

    logger.info(
        "Chat turn (score: %s, tier: %s, history: %d, documents: %s)",
        score, profile.tier.value, len(prior_turns), has_documents,
    )

    system_prompt = compose_system_prompt(profile, has_documents)
    payload = compose_request(system_prompt, prior_turns, new_text, CHAT_GENERATION_CONFIG)
    return await gateway.complete(payload)
