"""
CogniTutor - Tier Classifier
Maps an assessment score to the cognitive tier that drives prompt tailoring.
"""
from dataclasses import dataclass
from enum import Enum


class CognitiveTier(str, Enum):
    """Cognitive tiers used to tailor tutoring responses."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


TIER_LABELS = {
    CognitiveTier.LOW: "Below Average (Extremely Low to Low Average)",
    CognitiveTier.MEDIUM: "Average to High Average",
    CognitiveTier.HIGH: "Superior to Very Superior/Gifted",
}

# Inclusive bounds of the MEDIUM band
MEDIUM_LOWER_BOUND = 90
MEDIUM_UPPER_BOUND = 119


@dataclass(frozen=True)
class CognitiveProfile:
    """A score together with its derived tier. Never stored on its own."""
    score: float
    tier: CognitiveTier
    tier_label: str


def classify_tier(score: float) -> CognitiveProfile:
    """
    Classify a score into a cognitive tier.

    Any real number is accepted, including out-of-range values such as
    negative scores. 90 and 119 both belong to MEDIUM.
    """
    if score < MEDIUM_LOWER_BOUND:
        tier = CognitiveTier.LOW
    elif score <= MEDIUM_UPPER_BOUND:
        tier = CognitiveTier.MEDIUM
    else:
        tier = CognitiveTier.HIGH

    return CognitiveProfile(score=score, tier=tier, tier_label=TIER_LABELS[tier])
