"""Top-level v1 API router."""

from __future__ import annotations

from fastapi import APIRouter

from .endpoints.ai import router as ai_router
from .endpoints.export import router as export_router
from .endpoints.profile import router as profile_router
from .endpoints.resumes import router as resumes_router

api_v1_router = APIRouter(prefix="/api/v1")
api_v1_router.include_router(resumes_router)
api_v1_router.include_router(export_router)
api_v1_router.include_router(ai_router)
api_v1_router.include_router(profile_router)
