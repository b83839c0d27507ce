"""Storage for uploaded resume source files."""

from __future__ import annotations

import asyncio
import re
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Optional

from ..contracts.runtime import DEFAULT_ALLOWED_UPLOAD_MIME_TYPES, DEFAULT_MAX_UPLOAD_BYTES
from .errors import APIError
from .store import FileAttachment

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def _safe_name(filename: str) -> str:
    name = _UNSAFE_NAME_CHARS.sub("_", Path(filename or "").name).strip("._")
    return name or "upload"


class FileStorageProvider(ABC):
    """Storage contract for uploaded files, one namespace per user."""

    max_upload_bytes: int

    @abstractmethod
    def check_mime_type(self, mime_type: Optional[str]) -> str:
        """Return the normalized MIME type or raise ``UNSUPPORTED_FILE_TYPE``."""

    @abstractmethod
    async def write_file(self, user_id: str, filename: str, content: bytes, mime_type: str) -> FileAttachment:
        """Persist one uploaded file for a user."""

    @abstractmethod
    async def read_file(self, user_id: str, file_path: str) -> bytes:
        """Read a previously stored file."""

    @abstractmethod
    async def delete_file(self, user_id: str, file_path: str) -> bool:
        """Delete a stored file; return whether something was removed."""


class LocalFileStorageProvider(FileStorageProvider):
    """Local-disk backend; each user gets a sandboxed directory under ``root_dir``."""

    def __init__(
        self,
        root_dir: Path,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
        allowed_mime_types: Optional[Iterable[str]] = None,
    ) -> None:
        self.root_dir = root_dir.resolve()
        self.max_upload_bytes = max_upload_bytes
        self.allowed_mime_types = frozenset(allowed_mime_types or DEFAULT_ALLOWED_UPLOAD_MIME_TYPES)

    def check_mime_type(self, mime_type: Optional[str]) -> str:
        # drop parameters such as "; charset=utf-8"
        normalized = (mime_type or "").split(";", 1)[0].strip().lower()
        if normalized not in self.allowed_mime_types:
            raise APIError(
                422,
                "UNSUPPORTED_FILE_TYPE",
                f"Unsupported file type: {normalized or 'unknown'}",
                {"allowed_mime_types": sorted(self.allowed_mime_types)},
            )
        return normalized

    async def write_file(self, user_id: str, filename: str, content: bytes, mime_type: str) -> FileAttachment:
        if len(content) > self.max_upload_bytes:
            raise APIError(
                422,
                "UPLOAD_TOO_LARGE",
                "Uploaded file exceeds size limit",
                {"max_upload_bytes": self.max_upload_bytes},
            )
        relative = f"{uuid.uuid4().hex[:12]}-{_safe_name(filename)}"
        target = self._resolve_path(user_id, relative)

        def _write() -> FileAttachment:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
            return FileAttachment(
                file_name=filename,
                file_path=relative,
                file_size=target.stat().st_size,
                mime_type=mime_type,
            )

        return await asyncio.to_thread(_write)

    async def read_file(self, user_id: str, file_path: str) -> bytes:
        target = self._resolve_path(user_id, file_path)

        def _read() -> bytes:
            if not target.is_file():
                raise APIError(404, "FILE_NOT_FOUND", f"File '{file_path}' not found")
            return target.read_bytes()

        return await asyncio.to_thread(_read)

    async def delete_file(self, user_id: str, file_path: str) -> bool:
        target = self._resolve_path(user_id, file_path)

        def _delete() -> bool:
            if not target.is_file():
                return False
            target.unlink()
            return True

        return await asyncio.to_thread(_delete)

    def _user_root(self, user_id: str) -> Path:
        return (self.root_dir / _safe_name(user_id)).resolve()

    def _resolve_path(self, user_id: str, file_path: str) -> Path:
        candidate = (file_path or "").strip()
        if not candidate:
            raise APIError(422, "INVALID_PATH", "File path cannot be empty")

        relative = Path(candidate)
        if relative.is_absolute():
            raise APIError(422, "INVALID_PATH", "Absolute file paths are not allowed")

        user_root = self._user_root(user_id)
        resolved = (user_root / relative).resolve()
        try:
            resolved.relative_to(user_root)
        except ValueError as exc:
            raise APIError(422, "INVALID_PATH", "Path escapes user upload sandbox") from exc
        return resolved
