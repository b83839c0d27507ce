"""Export a resume to a downloadable artifact.

Picks the renderer for a requested format, derives a safe filename, and
reports which format was actually produced. Deterministic -- no LLM and no
network involved. Writing to disk is a separate step (:func:`save_export`)
so the web layer can stream the same bytes as a download instead.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict

from .resume import Resume
from .resume_renderer import DEFAULT_FONTS, PdfFonts, render_pdf, render_plain_text

DEFAULT_FILENAME = "my-resume"
SUPPORTED_FORMATS = ("pdf", "txt", "docx")

# docx has no real writer; it is produced as plain text.
_FORMAT_FALLBACKS: Dict[str, str] = {"docx": "txt"}

_MIME_TYPES: Dict[str, str] = {
    "pdf": "application/pdf",
    "txt": "text/plain; charset=utf-8",
}

_DISALLOWED_CHARS = re.compile(r"[^A-Za-z0-9_\- ]")
_WHITESPACE_RUN = re.compile(r"\s+")


class ExportError(Exception):
    """Rendering failed while producing an export artifact."""


class UnsupportedFormatError(ExportError):
    """The requested export format is not one of SUPPORTED_FORMATS."""

    def __init__(self, requested_format: str) -> None:
        super().__init__(
            f"Unsupported export format: {requested_format!r}. Supported: {', '.join(SUPPORTED_FORMATS)}"
        )
        self.requested_format = requested_format


@dataclass(frozen=True)
class ExportResult:
    requested_format: str
    actual_format: str
    filename: str
    content: bytes
    mime_type: str

    @property
    def downgraded(self) -> bool:
        return self.requested_format != self.actual_format


def sanitize_filename(title: str) -> str:
    """Derive a filesystem-safe base name from a resume title.

    Accented letters are folded to ASCII first, then anything outside
    ``[A-Za-z0-9_- ]`` is dropped and whitespace runs become hyphens.
    """
    folded = unicodedata.normalize("NFKD", title or "").encode("ascii", "ignore").decode("ascii")
    kept = _DISALLOWED_CHARS.sub("", folded).strip()
    base = _WHITESPACE_RUN.sub("-", kept).lower()
    return base or DEFAULT_FILENAME


def resolve_format(requested_format: str) -> str:
    """Map a requested format tag to the format that will be produced."""
    normalized = (requested_format or "").strip().lower()
    if normalized not in SUPPORTED_FORMATS:
        raise UnsupportedFormatError(requested_format)
    return _FORMAT_FALLBACKS.get(normalized, normalized)


def _render_text(resume: Resume, _fonts: PdfFonts) -> bytes:
    return render_plain_text(resume).encode("utf-8")


_RENDERERS: Dict[str, Callable[[Resume, PdfFonts], bytes]] = {
    "pdf": render_pdf,
    "txt": _render_text,
}


def export_resume(
    resume: Resume,
    requested_format: str = "pdf",
    fonts: PdfFonts = DEFAULT_FONTS,
) -> ExportResult:
    """Render ``resume`` for ``requested_format``.

    ``"docx"`` is produced as plain text; ``actual_format`` says so.
    ``fonts`` only affects PDF output. Renderer exceptions are re-raised as
    :class:`ExportError`.
    """
    actual_format = resolve_format(requested_format)
    renderer = _RENDERERS[actual_format]
    try:
        content = renderer(resume, fonts)
    except Exception as exc:
        raise ExportError(f"Failed to render {actual_format} export: {exc}") from exc

    base = sanitize_filename(resume.title or DEFAULT_FILENAME)
    return ExportResult(
        requested_format=requested_format.strip().lower(),
        actual_format=actual_format,
        filename=f"{base}.{actual_format}",
        content=content,
        mime_type=_MIME_TYPES[actual_format],
    )


def save_export(result: ExportResult, directory: Path) -> Path:
    """Write an export artifact into ``directory`` and return its path."""
    target = Path(directory).resolve() / result.filename
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(result.content)
    return target

