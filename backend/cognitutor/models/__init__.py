"""CogniTutor - Models initialization."""
from cognitutor.models.chat import ChatSession, ChatTurn, SessionDocument
from cognitutor.models.profile import LearnerProfile
from cognitutor.models.assessment import AssessmentRecord, IssuedAssessment


__all__ = [
    # Chat models
    "ChatSession",
    "ChatTurn",
    "SessionDocument",
    # Learner models
    "LearnerProfile",
    "AssessmentRecord",
    "IssuedAssessment",
]
