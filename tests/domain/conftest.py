"""Shared resume fixtures for domain tests."""

from __future__ import annotations

import pytest

from resume_builder.domain.resume import Education, Experience, PersonalInfo, Resume


@pytest.fixture
def full_resume() -> Resume:
    return Resume(
        title="Backend Engineer",
        personal_info=PersonalInfo(
            name="Jane Doe",
            email="jane@example.com",
            phone="+1 555 0100",
            location="Berlin",
            summary="Engineer with ten years of distributed systems work.",
        ),
        education=[
            Education(school="TU Berlin", degree="MSc Computer Science", year="2014"),
            Education(school="Uni Hamburg", degree="BSc Informatics", year="2012"),
        ],
        experience=[
            Experience(company="Acme", position="Staff Engineer", duration="2019 - now", description="Led payments."),
            Experience(company="Initech", position="Engineer", duration="2014 - 2019", description=""),
        ],
        skills=["Python", "PostgreSQL", "Kubernetes"],
    )
