"""CogniTutor - API v1 Router."""
from fastapi import APIRouter

from cognitutor.api.v1.profile import router as profile_router
from cognitutor.api.v1.assessment import router as assessment_router
from cognitutor.api.v1.documents import router as documents_router
from cognitutor.api.v1.chat import router as chat_router

api_router = APIRouter()

api_router.include_router(profile_router)
api_router.include_router(assessment_router)
api_router.include_router(documents_router)
api_router.include_router(chat_router)
