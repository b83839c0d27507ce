"""SQLite-backed resume store -- durable across restarts."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import aiosqlite

from ..domain.resume import Resume
from .errors import resume_not_found
from .store import FileAttachment, ProfileRecord, ResumeRecord, audit, make_id, utc_now_iso

logger = logging.getLogger("resume_builder.web.api")

_SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS resumes (
    resume_id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    title TEXT NOT NULL DEFAULT '',
    template_type TEXT NOT NULL DEFAULT 'modern',
    personal_info_json TEXT NOT NULL DEFAULT '{}',
    education_json TEXT NOT NULL DEFAULT '[]',
    experience_json TEXT NOT NULL DEFAULT '[]',
    skills_json TEXT NOT NULL DEFAULT '[]',
    file_name TEXT,
    file_path TEXT,
    file_size INTEGER,
    mime_type TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    revision INTEGER NOT NULL DEFAULT 0
);
CREATE INDEX IF NOT EXISTS idx_resumes_user ON resumes(user_id, updated_at);

CREATE TABLE IF NOT EXISTS profiles (
    user_id TEXT PRIMARY KEY,
    full_name TEXT NOT NULL DEFAULT '',
    email TEXT NOT NULL DEFAULT '',
    avatar_url TEXT NOT NULL DEFAULT '',
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""

# ---------------------------------------------------------------------------
# Helper: row -> record
# ---------------------------------------------------------------------------


def _row_to_resume(row: aiosqlite.Row) -> ResumeRecord:
    resume = Resume.from_dict(
        {
            "id": row["resume_id"],
            "title": row["title"],
            "template_type": row["template_type"],
            "personal_info": json.loads(row["personal_info_json"] or "{}"),
            "education": json.loads(row["education_json"] or "[]"),
            "experience": json.loads(row["experience_json"] or "[]"),
            "skills": json.loads(row["skills_json"] or "[]"),
        }
    )
    attachment = None
    if row["file_path"]:
        attachment = FileAttachment(
            file_name=row["file_name"] or "",
            file_path=row["file_path"],
            file_size=row["file_size"] or 0,
            mime_type=row["mime_type"] or "application/octet-stream",
        )
    return ResumeRecord(
        resume=resume,
        user_id=row["user_id"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        attachment=attachment,
        revision=row["revision"] or 0,
    )


def _row_to_profile(row: aiosqlite.Row) -> ProfileRecord:
    return ProfileRecord(
        user_id=row["user_id"],
        full_name=row["full_name"],
        email=row["email"],
        avatar_url=row["avatar_url"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _section_columns(resume: Resume) -> tuple:
    data = resume.to_dict()
    return (
        resume.title,
        resume.template_type,
        json.dumps(data["personal_info"]),
        json.dumps(data["education"]),
        json.dumps(data["experience"]),
        json.dumps(data["skills"]),
    )


class SQLiteResumeStore:
    """SQLite-backed resume store -- survives process restarts."""

    backend_name = "sqlite"

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        self._db: Optional[aiosqlite.Connection] = None

    # -- lifecycle -----------------------------------------------------------

    async def start(self) -> None:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._db = await aiosqlite.connect(str(self._db_path))
        self._db.row_factory = aiosqlite.Row
        await self._db.execute("PRAGMA journal_mode=WAL")
        await self._db.executescript(_SCHEMA_SQL)
        await self._db.commit()
        logger.info("sqlite_store_started path=%s", self._db_path)

    async def stop(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    @property
    def db(self) -> aiosqlite.Connection:
        if self._db is None:
            raise RuntimeError("SQLiteResumeStore is not started")
        return self._db

    # -- resumes -------------------------------------------------------------

    async def list_resumes(self, user_id: str) -> List[ResumeRecord]:
        async with self.db.execute(
            "SELECT * FROM resumes WHERE user_id = ? ORDER BY updated_at DESC, revision DESC",
            (user_id,),
        ) as cursor:
            rows = await cursor.fetchall()
        return [_row_to_resume(row) for row in rows]

    async def get_resume(self, resume_id: str, user_id: str) -> ResumeRecord:
        async with self.db.execute(
            "SELECT * FROM resumes WHERE resume_id = ? AND user_id = ?",
            (resume_id, user_id),
        ) as cursor:
            row = await cursor.fetchone()
        if not row:
            raise resume_not_found(resume_id)
        return _row_to_resume(row)

    async def save_resume(
        self,
        resume: Resume,
        user_id: str,
        attachment: Optional[FileAttachment] = None,
    ) -> ResumeRecord:
        now = utc_now_iso()
        revision = await self._next_revision()
        if resume.id:
            existing = await self.get_resume(resume.id, user_id)
            attachment = attachment or existing.attachment
            await self.db.execute(
                "UPDATE resumes SET title = ?, template_type = ?, personal_info_json = ?, education_json = ?,"
                " experience_json = ?, skills_json = ?, file_name = ?, file_path = ?, file_size = ?, mime_type = ?,"
                " updated_at = ?, revision = ? WHERE resume_id = ? AND user_id = ?",
                (
                    *_section_columns(resume),
                    *self._attachment_columns(attachment),
                    now,
                    revision,
                    resume.id,
                    user_id,
                ),
            )
            resume_id = resume.id
            action = "resume_updated"
        else:
            resume_id = make_id("res")
            await self.db.execute(
                "INSERT INTO resumes (resume_id, user_id, title, template_type, personal_info_json, education_json,"
                " experience_json, skills_json, file_name, file_path, file_size, mime_type, created_at, updated_at,"
                " revision) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    resume_id,
                    user_id,
                    *_section_columns(resume),
                    *self._attachment_columns(attachment),
                    now,
                    now,
                    revision,
                ),
            )
            action = "resume_created"
        await self.db.commit()
        audit(action, user_id, resume_id, {"title": resume.title})
        return await self.get_resume(resume_id, user_id)

    async def delete_resume(self, resume_id: str, user_id: str) -> ResumeRecord:
        record = await self.get_resume(resume_id, user_id)
        await self.db.execute(
            "DELETE FROM resumes WHERE resume_id = ? AND user_id = ?",
            (resume_id, user_id),
        )
        await self.db.commit()
        audit("resume_deleted", user_id, resume_id)
        return record

    # -- profile -------------------------------------------------------------

    async def get_profile(self, user_id: str) -> ProfileRecord:
        async with self.db.execute("SELECT * FROM profiles WHERE user_id = ?", (user_id,)) as cursor:
            row = await cursor.fetchone()
        if not row:
            return ProfileRecord(user_id=user_id)
        return _row_to_profile(row)

    async def upsert_profile(self, user_id: str, full_name: str, email: str, avatar_url: str) -> ProfileRecord:
        now = utc_now_iso()
        await self.db.execute(
            "INSERT INTO profiles (user_id, full_name, email, avatar_url, created_at, updated_at)"
            " VALUES (?, ?, ?, ?, ?, ?)"
            " ON CONFLICT(user_id) DO UPDATE SET full_name = excluded.full_name, email = excluded.email,"
            " avatar_url = excluded.avatar_url, updated_at = excluded.updated_at",
            (user_id, full_name, email, avatar_url, now, now),
        )
        await self.db.commit()
        audit("profile_updated", user_id, details={"full_name": full_name, "email": email})
        return await self.get_profile(user_id)

    # -- internals -----------------------------------------------------------

    async def _next_revision(self) -> int:
        async with self.db.execute("SELECT COALESCE(MAX(revision), 0) + 1 FROM resumes") as cursor:
            row = await cursor.fetchone()
        return int(row[0])

    @staticmethod
    def _attachment_columns(attachment: Optional[FileAttachment]) -> tuple:
        if attachment is None:
            return (None, None, None, None)
        return (attachment.file_name, attachment.file_path, attachment.file_size, attachment.mime_type)
