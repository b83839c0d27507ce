"""Pydantic contracts and shared constants."""

from .resume import (
    EducationModel,
    ExperienceModel,
    GeneratedResume,
    PersonalInfoModel,
    ProfilePayload,
    ProfileResponse,
    ResumeListResponse,
    ResumePayload,
    ResumeResponse,
)
from .runtime import (
    AI_ACTIONS,
    DEFAULT_ALLOWED_UPLOAD_MIME_TYPES,
    DEFAULT_MAX_UPLOAD_BYTES,
    STRUCTURED_AI_ACTIONS,
    AIAction,
)

__all__ = [
    "AI_ACTIONS",
    "DEFAULT_ALLOWED_UPLOAD_MIME_TYPES",
    "DEFAULT_MAX_UPLOAD_BYTES",
    "STRUCTURED_AI_ACTIONS",
    "AIAction",
    "EducationModel",
    "ExperienceModel",
    "GeneratedResume",
    "PersonalInfoModel",
    "ProfilePayload",
    "ProfileResponse",
    "ResumeListResponse",
    "ResumePayload",
    "ResumeResponse",
]
