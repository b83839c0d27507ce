"""Pure rendering of a :class:`Resume` into plain text or PDF bytes.

All functions are side-effect free: they read the resume, never mutate it,
and return new values. Writing files or HTTP responses is the exporter's
and web layer's job.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import List, Optional, Union

from reportlab.lib.pagesizes import A4
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from .resume import Resume

# ---------------------------------------------------------------------------
# Page geometry (points). Vertical positions are measured from the top edge.
# ---------------------------------------------------------------------------

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN_X = 40.0
MAX_TEXT_WIDTH = 515.0
TOP_Y = 60.0
PAGE_LIMIT_Y = 780.0
LINE_HEIGHT = 14.0
HEADER_LINE_HEIGHT = 16.0
DESCRIPTION_INDENT = 12.0

FONT_REGULAR = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
SZ_TITLE = 18.0
SZ_BODY = 11.0

CONTACT_SEPARATOR = "  •  "


@dataclass(frozen=True)
class PdfFonts:
    """Font names used for body text and headings."""

    regular: str = FONT_REGULAR
    bold: str = FONT_BOLD


DEFAULT_FONTS = PdfFonts()


def register_ttf_fonts(
    regular_path: Union[str, Path],
    bold_path: Optional[Union[str, Path]] = None,
) -> PdfFonts:
    """Register TrueType fonts with reportlab for text outside Latin-1.

    The standard Helvetica faces only cover Latin-1. Without ``bold_path`` the
    regular face is used for headings too.
    """
    regular = Path(regular_path)
    if not regular.is_file():
        raise FileNotFoundError(f"Font file not found: {regular}")
    pdfmetrics.registerFont(TTFont(regular.stem, str(regular)))
    if bold_path is None:
        return PdfFonts(regular=regular.stem, bold=regular.stem)

    bold = Path(bold_path)
    if not bold.is_file():
        raise FileNotFoundError(f"Font file not found: {bold}")
    pdfmetrics.registerFont(TTFont(bold.stem, str(bold)))
    return PdfFonts(regular=regular.stem, bold=bold.stem)


# ---------------------------------------------------------------------------
# Plain text
# ---------------------------------------------------------------------------


def render_plain_text(resume: Resume) -> str:
    """Flatten a resume into line-oriented text. Empty sections are omitted."""
    lines: List[str] = [f"# {resume.display_title}"]
    info = resume.personal_info
    if info.name:
        lines.append(f"Name: {info.name}")
    if info.email:
        lines.append(f"Email: {info.email}")
    if info.phone:
        lines.append(f"Phone: {info.phone}")
    if info.location:
        lines.append(f"Location: {info.location}")
    if info.summary:
        lines.extend(["", "Summary:", info.summary])

    if resume.experience:
        lines.extend(["", "Experience:"])
        for exp in resume.experience:
            lines.append(f"- {exp.position} @ {exp.company} ({exp.duration})")
            if exp.description:
                lines.append(f"  {exp.description}")

    if resume.education:
        lines.extend(["", "Education:"])
        for edu in resume.education:
            lines.append(f"- {edu.degree} - {edu.school} ({edu.year})")

    if resume.skills:
        lines.extend(["", f"Skills: {', '.join(resume.skills)}"])

    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Text wrapping
# ---------------------------------------------------------------------------


def _width(text: str, font: str, size: float) -> float:
    return stringWidth(text, font, size)


def _break_word(word: str, font: str, size: float, max_width: float) -> List[str]:
    """Split a single over-wide word into chunks that each fit ``max_width``."""
    chunks: List[str] = []
    current = ""
    for char in word:
        if current and _width(current + char, font, size) > max_width:
            chunks.append(current)
            current = char
        else:
            current += char
    if current:
        chunks.append(current)
    return chunks


def wrap_text(text: str, font: str, size: float, max_width: float = MAX_TEXT_WIDTH) -> List[str]:
    """Greedy word wrap measured with the font's real glyph widths.

    Explicit newlines start a new line. Words wider than ``max_width`` are
    broken by characters, so no input character is ever dropped.
    """
    if not text:
        return []

    lines: List[str] = []
    for paragraph in text.split("\n"):
        words = paragraph.split()
        if not words:
            lines.append("")
            continue

        current = ""
        for word in words:
            if _width(word, font, size) > max_width:
                if current:
                    lines.append(current)
                pieces = _break_word(word, font, size, max_width)
                lines.extend(pieces[:-1])
                current = pieces[-1]
                continue

            candidate = f"{current} {word}" if current else word
            if _width(candidate, font, size) <= max_width:
                current = candidate
            else:
                lines.append(current)
                current = word
        if current:
            lines.append(current)
    return lines


# ---------------------------------------------------------------------------
# PDF layout
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PlacedLine:
    """One line of text at a fixed position on a page."""

    text: str
    x: float
    y: float
    font: str
    size: float


@dataclass
class PdfLayout:
    pages: List[List[PlacedLine]] = field(default_factory=lambda: [[]])

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def texts(self) -> List[str]:
        return [line.text for page in self.pages for line in page]


class _PageCursor:
    """Tracks the vertical position and opens new pages on overflow."""

    def __init__(self, fonts: PdfFonts) -> None:
        self.fonts = fonts
        self.layout = PdfLayout()
        self.y = TOP_Y

    def advance(self, delta: float) -> None:
        self.y += delta

    def emit(self, text: str, x: float, font: str, size: float) -> None:
        if self.y > PAGE_LIMIT_Y:
            self.layout.pages.append([])
            self.y = TOP_Y
        self.layout.pages[-1].append(PlacedLine(text=text, x=x, y=self.y, font=font, size=size))

    def emit_wrapped(self, text: str, x: float = MARGIN_X) -> None:
        font = self.fonts.regular
        width = MAX_TEXT_WIDTH - (x - MARGIN_X)
        for line in wrap_text(text, font, SZ_BODY, width):
            self.emit(line, x, font, SZ_BODY)
            self.advance(LINE_HEIGHT)

    def heading(self, text: str, gap: float) -> None:
        self.advance(gap)
        self.emit(text, MARGIN_X, self.fonts.bold, SZ_BODY)
        self.advance(LINE_HEIGHT)


def _experience_title(position: str, company: str, duration: str) -> str:
    title = position
    if company:
        title += f" @ {company}"
    if duration:
        title += f" ({duration})"
    return title.strip()


def _education_line(degree: str, school: str, year: str) -> str:
    line = degree
    if school:
        line += f" - {school}"
    if year:
        line += f" ({year})"
    return line.strip()


def layout_pdf(resume: Resume, fonts: PdfFonts = DEFAULT_FONTS) -> PdfLayout:
    """Compute page-by-page line placement for :func:`render_pdf`."""
    cursor = _PageCursor(fonts)

    cursor.emit(resume.display_title, MARGIN_X, fonts.bold, SZ_TITLE)
    cursor.advance(24)

    info = resume.personal_info
    header_lines: List[str] = []
    if info.name:
        header_lines.append(info.name)
    contact = CONTACT_SEPARATOR.join(part for part in (info.email, info.phone, info.location) if part)
    if contact:
        header_lines.append(contact)
    for line in header_lines:
        cursor.emit(line, MARGIN_X, fonts.regular, SZ_BODY)
        cursor.advance(HEADER_LINE_HEIGHT)

    if info.summary:
        cursor.heading("Summary", gap=8)
        cursor.emit_wrapped(info.summary)

    if resume.experience:
        cursor.heading("Experience", gap=12)
        for exp in resume.experience:
            cursor.emit_wrapped(_experience_title(exp.position, exp.company, exp.duration))
            if exp.description:
                cursor.emit_wrapped(exp.description, x=MARGIN_X + DESCRIPTION_INDENT)
            cursor.advance(8)

    if resume.education:
        cursor.heading("Education", gap=12)
        for edu in resume.education:
            cursor.emit_wrapped(_education_line(edu.degree, edu.school, edu.year))

    if resume.skills:
        cursor.heading("Skills", gap=12)
        cursor.emit_wrapped(", ".join(resume.skills))

    return cursor.layout


def render_pdf(resume: Resume, fonts: PdfFonts = DEFAULT_FONTS) -> bytes:
    """Render an A4 PDF. Output is byte-identical for identical input."""
    layout = layout_pdf(resume, fonts)
    buffer = BytesIO()
    # invariant mode pins creation dates and document ids
    pdf = canvas.Canvas(buffer, pagesize=A4, invariant=1)
    pdf.setTitle(resume.display_title)

    for index, page in enumerate(layout.pages):
        if index:
            pdf.showPage()
        for line in page:
            pdf.setFont(line.font, line.size)
            pdf.drawString(line.x, PAGE_HEIGHT - line.y, line.text)

    pdf.save()
    result = buffer.getvalue()
    buffer.close()
    return result
