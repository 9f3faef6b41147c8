"""
CogniTutor - Learner Profile Router
"""
from fastapi import APIRouter

from cognitutor.api.deps import CurrentUserId, DbSession
from cognitutor.ai.tier_classifier import classify_tier
from cognitutor.models.profile import LearnerProfile
from cognitutor.schemas.profile import ProfileResponse, ProfileUpdateRequest
from cognitutor.services.profile import ProfileService


router = APIRouter(prefix="/profile", tags=["Profile"])


def to_profile_response(profile: LearnerProfile) -> ProfileResponse:
    derived = classify_tier(profile.score) if profile.score is not None else None
    return ProfileResponse(
        user_id=profile.user_id,
        score=profile.score,
        has_completed_assessment=profile.has_completed_assessment,
        tier=derived.tier if derived else None,
        tier_label=derived.tier_label if derived else None,
        test_frequency=profile.test_frequency,
        last_assessed_at=profile.last_assessed_at,
    )


@router.get("", response_model=ProfileResponse)
async def get_profile(user_id: CurrentUserId, db: DbSession):
    """Get the caller's profile, creating an empty one on first access."""
    profile = await ProfileService(db).get_or_create(user_id)
    return to_profile_response(profile)


@router.patch("", response_model=ProfileResponse)
async def update_profile(request: ProfileUpdateRequest, user_id: CurrentUserId, db: DbSession):
    profile = await ProfileService(db).update_settings(user_id, request.test_frequency.value)
    return to_profile_response(profile)
