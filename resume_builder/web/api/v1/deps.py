"""Dependency providers for v1 API."""

from __future__ import annotations

from fastapi import Request

from ....ai_gateway import AIGateway
from ....domain.resume_renderer import PdfFonts
from ...file_storage import FileStorageProvider
from ...store_protocol import ResumeStore

DEFAULT_USER_ID = "local-dev"


def get_store(request: Request) -> ResumeStore:
    """Access shared resume store from app state."""
    return request.app.state.resume_store


def get_file_storage(request: Request) -> FileStorageProvider:
    return request.app.state.file_storage


def get_ai_gateway(request: Request) -> AIGateway:
    return request.app.state.ai_gateway


def get_pdf_fonts(request: Request) -> PdfFonts:
    return request.app.state.pdf_fonts


def get_user_id(request: Request) -> str:
    """Return user identifier resolved by auth middleware."""
    user_id = getattr(request.state, "user_id", None)
    return user_id or DEFAULT_USER_ID
