"""Pure resume domain logic: value types, rendering and export."""

from .exporter import (
    SUPPORTED_FORMATS,
    ExportError,
    ExportResult,
    UnsupportedFormatError,
    export_resume,
    sanitize_filename,
    save_export,
)
from .resume import DEFAULT_TITLE, Education, Experience, PersonalInfo, Resume
from .resume_renderer import (
    DEFAULT_FONTS,
    PdfFonts,
    layout_pdf,
    register_ttf_fonts,
    render_pdf,
    render_plain_text,
    wrap_text,
)

__all__ = [
    "DEFAULT_FONTS",
    "DEFAULT_TITLE",
    "SUPPORTED_FORMATS",
    "Education",
    "Experience",
    "ExportError",
    "ExportResult",
    "PdfFonts",
    "PersonalInfo",
    "Resume",
    "UnsupportedFormatError",
    "export_resume",
    "layout_pdf",
    "register_ttf_fonts",
    "render_pdf",
    "render_plain_text",
    "sanitize_filename",
    "save_export",
    "wrap_text",
]
