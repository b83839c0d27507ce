"""Resume request/response contracts."""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..domain.resume import DEFAULT_TEMPLATE_TYPE, Resume


class _TextFields(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_scalar(cls, value: Any) -> Any:
        if value is None:
            return ""
        # models often emit years and durations as numbers
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class PersonalInfoModel(_TextFields):
    name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    summary: str = ""


class EducationModel(_TextFields):
    school: str = ""
    degree: str = ""
    year: str = ""


class ExperienceModel(_TextFields):
    company: str = ""
    position: str = ""
    duration: str = ""
    description: str = ""


class GeneratedResume(BaseModel):
    """Shape an AI reply must have for resume-producing actions.

    All four sections are required; ``id`` and ``title`` are never part of
    an AI reply.
    """

    model_config = ConfigDict(extra="ignore")

    personal_info: PersonalInfoModel
    education: List[EducationModel]
    experience: List[ExperienceModel]
    skills: List[str]


class ResumePayload(BaseModel):
    """Client-supplied resume body for create/update/export."""

    model_config = ConfigDict(extra="ignore")

    title: str = ""
    personal_info: PersonalInfoModel = Field(default_factory=PersonalInfoModel)
    education: List[EducationModel] = Field(default_factory=list)
    experience: List[ExperienceModel] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    template_type: str = DEFAULT_TEMPLATE_TYPE

    def to_resume(self, resume_id: Optional[str] = None) -> Resume:
        data = self.model_dump()
        data["id"] = resume_id
        return Resume.from_dict(data)


class ResumeResponse(ResumePayload):
    id: str
    created_at: str
    updated_at: str
    file_name: Optional[str] = None
    file_path: Optional[str] = None
    file_size: Optional[int] = None
    mime_type: Optional[str] = None


class ResumeListResponse(BaseModel):
    items: List[ResumeResponse]


class ProfilePayload(BaseModel):
    full_name: str = ""
    email: str = ""
    avatar_url: str = ""


class ProfileResponse(ProfilePayload):
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
