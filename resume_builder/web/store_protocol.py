"""ResumeStore protocol -- the contract both InMemory and SQLite stores implement."""

from __future__ import annotations

from typing import List, Optional, runtime_checkable

from typing_extensions import Protocol

from ..domain.resume import Resume

# Re-export record types so endpoint code can import from one place.
from .store import FileAttachment, ProfileRecord, ResumeRecord  # noqa: F401


@runtime_checkable
class ResumeStore(Protocol):
    """Public surface consumed by API endpoints.

    Every method is scoped to one user; records of other users behave as
    if they did not exist (``RESUME_NOT_FOUND``).
    """

    backend_name: str

    # -- lifecycle -----------------------------------------------------------
    async def start(self) -> None: ...
    async def stop(self) -> None: ...

    # -- resumes -------------------------------------------------------------
    async def list_resumes(self, user_id: str) -> List[ResumeRecord]: ...

    async def get_resume(self, resume_id: str, user_id: str) -> ResumeRecord: ...

    async def save_resume(
        self,
        resume: Resume,
        user_id: str,
        attachment: Optional[FileAttachment] = None,
    ) -> ResumeRecord: ...

    async def delete_resume(self, resume_id: str, user_id: str) -> ResumeRecord: ...

    # -- profile -------------------------------------------------------------
    async def get_profile(self, user_id: str) -> ProfileRecord: ...

    async def upsert_profile(self, user_id: str, full_name: str, email: str, avatar_url: str) -> ProfileRecord: ...
