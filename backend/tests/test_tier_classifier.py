"""
CogniTutor - Tier Classifier Tests
"""
import pytest

from cognitutor.ai.tier_classifier import TIER_LABELS, CognitiveTier, classify_tier


@pytest.mark.parametrize(
    "score,expected",
    [
        (0, CognitiveTier.LOW),
        (89, CognitiveTier.LOW),
        (89.9, CognitiveTier.LOW),
        (90, CognitiveTier.MEDIUM),
        (105, CognitiveTier.MEDIUM),
        (119, CognitiveTier.MEDIUM),
        (119.5, CognitiveTier.HIGH),
        (120, CognitiveTier.HIGH),
        (200, CognitiveTier.HIGH),
    ],
)
def test_tier_boundaries(score, expected):
    assert classify_tier(score).tier == expected


def test_out_of_range_scores_are_classified():
    assert classify_tier(-15).tier == CognitiveTier.LOW
    assert classify_tier(450).tier == CognitiveTier.HIGH


def test_profile_carries_score_and_label():
    profile = classify_tier(150)
    assert profile.score == 150
    assert profile.tier_label == TIER_LABELS[CognitiveTier.HIGH]
    assert profile.tier_label == "Superior to Very Superior/Gifted"


def test_classification_is_deterministic():
    assert classify_tier(97) == classify_tier(97)
