"""Plain text and PDF rendering tests."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path

import pytest
import reportlab
from pypdf import PdfReader
from reportlab.pdfbase.pdfmetrics import stringWidth

from resume_builder.domain.resume import Education, Experience, PersonalInfo, Resume
from resume_builder.domain.resume_renderer import (
    DEFAULT_FONTS,
    DESCRIPTION_INDENT,
    FONT_BOLD,
    FONT_REGULAR,
    MARGIN_X,
    PAGE_LIMIT_Y,
    TOP_Y,
    PdfFonts,
    layout_pdf,
    register_ttf_fonts,
    render_pdf,
    render_plain_text,
    wrap_text,
)

# ---------------------------------------------------------------------------
# Plain text
# ---------------------------------------------------------------------------


def test_plain_text_full_resume(full_resume) -> None:
    assert render_plain_text(full_resume) == "\n".join(
        [
            "# Backend Engineer",
            "Name: Jane Doe",
            "Email: jane@example.com",
            "Phone: +1 555 0100",
            "Location: Berlin",
            "",
            "Summary:",
            "Engineer with ten years of distributed systems work.",
            "",
            "Experience:",
            "- Staff Engineer @ Acme (2019 - now)",
            "  Led payments.",
            "- Engineer @ Initech (2014 - 2019)",
            "",
            "Education:",
            "- MSc Computer Science - TU Berlin (2014)",
            "- BSc Informatics - Uni Hamburg (2012)",
            "",
            "Skills: Python, PostgreSQL, Kubernetes",
        ]
    )


def test_title_only_resume_has_single_non_empty_line() -> None:
    text = render_plain_text(Resume(title="Just a title"))
    assert [line for line in text.splitlines() if line.strip()] == ["# Just a title"]


def test_empty_title_uses_default_heading() -> None:
    assert render_plain_text(Resume()) == "# My Resume"


def test_plain_text_preserves_section_order(full_resume) -> None:
    text = render_plain_text(full_resume)
    assert text.index("Staff Engineer") < text.index("- Engineer @ Initech")
    assert text.index("TU Berlin") < text.index("Uni Hamburg")
    assert text.index("Experience:") < text.index("Education:") < text.index("Skills:")


def test_appending_skill_extends_trailing_skills_line(full_resume) -> None:
    before = render_plain_text(full_resume).splitlines()[-1]
    full_resume.skills.append("Terraform")
    after = render_plain_text(full_resume).splitlines()[-1]
    assert after == f"{before}, Terraform"


# ---------------------------------------------------------------------------
# Wrapping
# ---------------------------------------------------------------------------


def test_wrap_text_empty_and_short() -> None:
    assert wrap_text("", FONT_REGULAR, 11) == []
    assert wrap_text("short line", FONT_REGULAR, 11) == ["short line"]


def test_wrap_text_keeps_explicit_blank_lines() -> None:
    assert wrap_text("first\n\nsecond", FONT_REGULAR, 11) == ["first", "", "second"]


def test_wrap_text_lines_fit_width_and_keep_words() -> None:
    text = " ".join(f"word{i}" for i in range(60))
    lines = wrap_text(text, FONT_REGULAR, 11, max_width=200)
    assert len(lines) > 1
    assert all(stringWidth(line, FONT_REGULAR, 11) <= 200 for line in lines)
    assert " ".join(lines).split() == text.split()


def test_wrap_text_breaks_over_wide_word_without_dropping_characters() -> None:
    word = "x" * 300
    lines = wrap_text(word, FONT_REGULAR, 11, max_width=100)
    assert len(lines) > 1
    assert "".join(lines) == word
    assert all(stringWidth(line, FONT_REGULAR, 11) <= 100 for line in lines)


# ---------------------------------------------------------------------------
# PDF layout
# ---------------------------------------------------------------------------


def test_layout_header_positions(full_resume) -> None:
    page = layout_pdf(full_resume).pages[0]

    title, name, contact, summary_heading = page[:4]
    assert (title.text, title.y, title.font) == ("Backend Engineer", TOP_Y, FONT_BOLD)
    assert (name.text, name.y) == ("Jane Doe", TOP_Y + 24)
    assert contact.text == "jane@example.com  •  +1 555 0100  •  Berlin"
    assert contact.y == TOP_Y + 40
    assert (summary_heading.text, summary_heading.y) == ("Summary", TOP_Y + 64)


def test_layout_omits_empty_sections() -> None:
    texts = layout_pdf(Resume(title="Only")).texts()
    assert texts == ["Only"]


def test_long_description_continues_on_next_page_without_loss() -> None:
    description = " ".join(f"achievement{i}" for i in range(1200))
    resume = Resume(
        title="Long",
        personal_info=PersonalInfo(name="Jane Doe"),
        experience=[Experience(company="Acme", position="Engineer", duration="2020", description=description)],
        skills=["Python"],
    )

    layout = layout_pdf(resume)

    assert layout.page_count >= 2
    assert layout.pages[1][0].y == TOP_Y
    for page in layout.pages:
        assert all(line.y <= PAGE_LIMIT_Y for line in page)

    description_lines = [
        line.text for page in layout.pages for line in page if line.x == MARGIN_X + DESCRIPTION_INDENT
    ]
    assert " ".join(description_lines).split() == description.split()
    assert layout.texts()[-2:] == ["Skills", "Python"]


def test_render_pdf_matches_layout(full_resume) -> None:
    content = render_pdf(full_resume)
    reader = PdfReader(BytesIO(content))

    assert content.startswith(b"%PDF")
    assert len(reader.pages) == layout_pdf(full_resume).page_count
    assert reader.metadata.title == "Backend Engineer"
    assert "Staff Engineer @ Acme" in reader.pages[0].extract_text()


def test_rendering_is_pure_and_repeatable(full_resume) -> None:
    snapshot = full_resume.to_dict()

    assert render_pdf(full_resume) == render_pdf(full_resume)
    assert render_plain_text(full_resume) == render_plain_text(full_resume)
    assert full_resume.to_dict() == snapshot


def _summary_overflow() -> tuple:
    summary = " ".join(f"impact{i}" for i in range(1500))
    return Resume(title="Long", personal_info=PersonalInfo(summary=summary)), "Summary", summary.split()


def _experience_overflow() -> tuple:
    jobs = [Experience(company=f"Company{i}", position="Engineer", duration="2020") for i in range(80)]
    expected = " ".join(f"Engineer @ Company{i} (2020)" for i in range(80)).split()
    return Resume(title="Long", experience=jobs), "Experience", expected


def _education_overflow() -> tuple:
    schools = [Education(school=f"School{i}", degree="BSc", year="2010") for i in range(120)]
    expected = " ".join(f"BSc - School{i} (2010)" for i in range(120)).split()
    return Resume(title="Long", education=schools), "Education", expected


def _skills_overflow() -> tuple:
    skills = [f"skill{i}" for i in range(1500)]
    return Resume(title="Long", skills=skills), "Skills", ", ".join(skills).split()


@pytest.mark.parametrize(
    "build",
    [_summary_overflow, _experience_overflow, _education_overflow, _skills_overflow],
    ids=["summary", "experience", "education", "skills"],
)
def test_every_section_paginates_without_loss(build) -> None:
    resume, heading, expected_words = build()

    layout = layout_pdf(resume)

    assert layout.page_count >= 2
    assert layout.pages[1][0].y == TOP_Y
    for page in layout.pages:
        assert all(line.y <= PAGE_LIMIT_Y for line in page)

    texts = layout.texts()
    section = texts[texts.index(heading) + 1 :]
    assert " ".join(section).split() == expected_words


# ---------------------------------------------------------------------------
# Fonts
# ---------------------------------------------------------------------------


def _bundled_ttf(name: str) -> Path:
    return Path(reportlab.__file__).parent / "fonts" / name


def test_registered_ttf_font_is_used_for_layout_and_embedded() -> None:
    fonts = register_ttf_fonts(_bundled_ttf("Vera.ttf"), _bundled_ttf("VeraBd.ttf"))
    resume = Resume(title="Lebenslauf", personal_info=PersonalInfo(name="Jürgen Müller", summary="Straße"))

    layout = layout_pdf(resume, fonts)
    content = render_pdf(resume, fonts)

    assert fonts == PdfFonts(regular="Vera", bold="VeraBd")
    assert layout.pages[0][0].font == "VeraBd"
    assert {line.font for line in layout.pages[0][1:]} <= {"Vera", "VeraBd"}
    assert b"/FontFile2" in content
    assert "Jürgen Müller" in PdfReader(BytesIO(content)).pages[0].extract_text()


def test_single_ttf_font_serves_headings_too() -> None:
    fonts = register_ttf_fonts(_bundled_ttf("Vera.ttf"))
    assert fonts == PdfFonts(regular="Vera", bold="Vera")


def test_register_missing_font_file_fails(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        register_ttf_fonts(tmp_path / "missing.ttf")


def test_default_fonts_are_standard_helvetica(full_resume) -> None:
    assert DEFAULT_FONTS == PdfFonts(regular=FONT_REGULAR, bold=FONT_BOLD)
    assert layout_pdf(full_resume) == layout_pdf(full_resume, DEFAULT_FONTS)
