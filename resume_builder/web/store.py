"""In-memory resume store for the web API and tests."""

from __future__ import annotations

import asyncio
import itertools
import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..domain.resume import Resume
from ..redaction import redact_for_log
from .errors import resume_not_found

audit_logger = logging.getLogger("resume_builder.web.audit")


def utc_now_iso() -> str:
    """Return current UTC time in ISO-8601 format with microseconds."""
    return datetime.now(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


def make_id(prefix: str) -> str:
    """Create an opaque id with a type prefix, e.g. ``res_3f9a0c1b2d``."""
    return f"{prefix}_{uuid.uuid4().hex[:10]}"


def _clone(resume: Resume, resume_id: Optional[str]) -> Resume:
    data = resume.to_dict()
    data["id"] = resume_id
    return Resume.from_dict(data)


def audit(action: str, user_id: str, resume_id: Optional[str] = None, details: Optional[Dict[str, Any]] = None) -> None:
    audit_logger.info(
        "audit action=%s user_id=%s resume_id=%s details=%s",
        action,
        user_id,
        resume_id or "-",
        redact_for_log(details or {}),
    )


@dataclass(frozen=True)
class FileAttachment:
    """Metadata of an uploaded source file linked to a resume."""

    file_name: str
    file_path: str
    file_size: int
    mime_type: str


@dataclass
class ResumeRecord:
    resume: Resume
    user_id: str
    created_at: str
    updated_at: str
    attachment: Optional[FileAttachment] = None
    revision: int = 0

    @property
    def resume_id(self) -> str:
        return self.resume.id or ""


@dataclass
class ProfileRecord:
    user_id: str
    full_name: str = ""
    email: str = ""
    avatar_url: str = ""
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass
class _UserData:
    resumes: Dict[str, ResumeRecord] = field(default_factory=dict)
    profile: Optional[ProfileRecord] = None


class InMemoryResumeStore:
    """Per-user resume and profile storage held in process memory."""

    backend_name = "memory"

    def __init__(self) -> None:
        self._users: Dict[str, _UserData] = {}
        self._lock = asyncio.Lock()
        # updated_at alone can tie within one clock tick
        self._revisions = itertools.count(1)

    async def start(self) -> None:
        return None

    async def stop(self) -> None:
        return None

    # -- resumes -------------------------------------------------------------

    async def list_resumes(self, user_id: str) -> List[ResumeRecord]:
        async with self._lock:
            records = list(self._user_locked(user_id).resumes.values())
        records.sort(key=lambda record: (record.updated_at, record.revision), reverse=True)
        return [self._copy(record) for record in records]

    async def get_resume(self, resume_id: str, user_id: str) -> ResumeRecord:
        async with self._lock:
            record = self._user_locked(user_id).resumes.get(resume_id)
            if record is None:
                raise resume_not_found(resume_id)
            return self._copy(record)

    async def save_resume(
        self,
        resume: Resume,
        user_id: str,
        attachment: Optional[FileAttachment] = None,
    ) -> ResumeRecord:
        """Insert when ``resume.id`` is empty, otherwise update the user's record."""
        now = utc_now_iso()
        async with self._lock:
            resumes = self._user_locked(user_id).resumes
            if resume.id:
                existing = resumes.get(resume.id)
                if existing is None:
                    raise resume_not_found(resume.id)
                stored = _clone(resume, resume.id)
                record = ResumeRecord(
                    resume=stored,
                    user_id=user_id,
                    created_at=existing.created_at,
                    updated_at=now,
                    attachment=attachment or existing.attachment,
                    revision=next(self._revisions),
                )
                action = "resume_updated"
            else:
                stored = _clone(resume, make_id("res"))
                record = ResumeRecord(
                    resume=stored,
                    user_id=user_id,
                    created_at=now,
                    updated_at=now,
                    attachment=attachment,
                    revision=next(self._revisions),
                )
                action = "resume_created"
            resumes[record.resume_id] = record
            result = self._copy(record)
        audit(action, user_id, result.resume_id, {"title": result.resume.title})
        return result

    async def delete_resume(self, resume_id: str, user_id: str) -> ResumeRecord:
        async with self._lock:
            record = self._user_locked(user_id).resumes.pop(resume_id, None)
        if record is None:
            raise resume_not_found(resume_id)
        audit("resume_deleted", user_id, resume_id)
        return record

    # -- profile -------------------------------------------------------------

    async def get_profile(self, user_id: str) -> ProfileRecord:
        async with self._lock:
            profile = self._user_locked(user_id).profile
        return replace(profile) if profile else ProfileRecord(user_id=user_id)

    async def upsert_profile(self, user_id: str, full_name: str, email: str, avatar_url: str) -> ProfileRecord:
        now = utc_now_iso()
        async with self._lock:
            data = self._user_locked(user_id)
            created_at = data.profile.created_at if data.profile else now
            data.profile = ProfileRecord(
                user_id=user_id,
                full_name=full_name,
                email=email,
                avatar_url=avatar_url,
                created_at=created_at,
                updated_at=now,
            )
            result = replace(data.profile)
        audit("profile_updated", user_id, details={"full_name": full_name, "email": email})
        return result

    # -- internals -----------------------------------------------------------

    def _user_locked(self, user_id: str) -> _UserData:
        return self._users.setdefault(user_id, _UserData())

    @staticmethod
    def _copy(record: ResumeRecord) -> ResumeRecord:
        # callers must not be able to mutate stored state
        return replace(record, resume=_clone(record.resume, record.resume.id))
