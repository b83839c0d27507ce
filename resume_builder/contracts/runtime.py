"""Shared runtime constants/types for the web API and AI gateway."""

from __future__ import annotations

from typing import Final, Literal, TypeAlias

AIAction: TypeAlias = Literal["generate_resume", "improve_resume", "answer_query"]

AI_ACTIONS: Final[tuple[AIAction, ...]] = ("generate_resume", "improve_resume", "answer_query")
STRUCTURED_AI_ACTIONS: Final[frozenset[str]] = frozenset({"generate_resume", "improve_resume"})
DEFAULT_MAX_UPLOAD_BYTES: Final[int] = 10 * 1024 * 1024
DEFAULT_ALLOWED_UPLOAD_MIME_TYPES: Final[tuple[str, ...]] = (
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
)
