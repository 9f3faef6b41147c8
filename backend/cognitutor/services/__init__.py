"""CogniTutor - Services initialization."""
from cognitutor.services.assessment import (
    AssessmentAlreadySubmitted,
    AssessmentNotFound,
    AssessmentService,
)
from cognitutor.services.chat import ChatService, DocumentNotFound, SessionNotFound
from cognitutor.services.profile import AssessmentRequired, ProfileService

__all__ = [
    "AssessmentAlreadySubmitted",
    "AssessmentNotFound",
    "AssessmentService",
    "ChatService",
    "DocumentNotFound",
    "SessionNotFound",
    "AssessmentRequired",
    "ProfileService",
]
