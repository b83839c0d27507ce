"""AI gateway tests: action routing, reply validation, failure reporting."""

from __future__ import annotations

import json
from typing import List

import pytest

from resume_builder.ai_gateway import AIGateway, AIResult, AIValidationError, parse_resume_reply
from resume_builder.domain.prompts import SYSTEM_PROMPTS
from resume_builder.domain.resume import PersonalInfo, Resume
from resume_builder.providers.stub import StubProvider
from resume_builder.providers.types import GenerationConfig, LLMResponse, Message

VALID_REPLY = {
    "personal_info": {"name": "Jane", "email": "jane@example.com", "phone": None, "location": "", "summary": "x"},
    "education": [{"school": "MIT", "degree": "BSc", "year": "2010"}],
    "experience": [{"company": "Acme", "position": "Dev", "duration": "2y", "description": "Built things"}],
    "skills": ["Python"],
}


class FakeProvider:
    model = "fake-model"

    def __init__(self, text: str = "", error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.calls: List[tuple[List[Message], GenerationConfig]] = []

    async def generate(self, messages: List[Message], config: GenerationConfig) -> LLMResponse:
        self.calls.append((messages, config))
        if self.error:
            raise self.error
        return LLMResponse(text=self.text)


def test_parse_resume_reply_accepts_fenced_json() -> None:
    data = parse_resume_reply(f"```json\n{json.dumps(VALID_REPLY)}\n```")
    assert data["personal_info"]["phone"] == ""
    assert data["skills"] == ["Python"]


def test_parse_resume_reply_rejects_invalid_json() -> None:
    with pytest.raises(AIValidationError, match="Invalid JSON"):
        parse_resume_reply("Sure! Here is your resume:")


def test_parse_resume_reply_rejects_non_object() -> None:
    with pytest.raises(AIValidationError, match="JSON object"):
        parse_resume_reply("[1, 2]")


def test_parse_resume_reply_reports_missing_sections() -> None:
    reply = dict(VALID_REPLY)
    del reply["skills"]
    with pytest.raises(AIValidationError, match="skills"):
        parse_resume_reply(json.dumps(reply))


@pytest.mark.asyncio
async def test_generate_resume_sends_system_prompt_and_json_mode() -> None:
    provider = FakeProvider(text=json.dumps(VALID_REPLY))
    gateway = AIGateway(provider, max_tokens=2000)

    outcome = await gateway.invoke(prompt="Jane, Python dev", action="generate_resume")

    assert outcome.success
    assert outcome.result["experience"][0]["company"] == "Acme"
    messages, config = provider.calls[0]
    assert messages[0].text == "Jane, Python dev"
    assert config.system_prompt == SYSTEM_PROMPTS["generate_resume"]
    assert config.json_output is True
    assert config.max_tokens == 2000


@pytest.mark.asyncio
async def test_answer_query_returns_free_text() -> None:
    provider = FakeProvider(text="Keep it to one page.")
    outcome = await AIGateway(provider).invoke(prompt="How long?", action="answer_query")

    assert outcome == AIResult(success=True, result="Keep it to one page.")
    assert provider.calls[0][1].json_output is False


@pytest.mark.asyncio
async def test_schema_mismatch_is_reported_not_returned() -> None:
    provider = FakeProvider(text=json.dumps({"personal_info": {}, "skills": "python"}))
    outcome = await AIGateway(provider).invoke(prompt="x", action="improve_resume")

    assert not outcome.success
    assert outcome.result is None
    assert "does not match resume schema" in outcome.error
    assert outcome.to_dict() == {"success": False, "error": outcome.error}


@pytest.mark.asyncio
async def test_provider_failure_is_reported() -> None:
    provider = FakeProvider(error=ConnectionError("network down"))
    outcome = await AIGateway(provider).invoke(prompt="x", action="answer_query")

    assert not outcome.success
    assert "network down" in outcome.error
    assert len(provider.calls) == 1


@pytest.mark.asyncio
async def test_unknown_action_is_rejected_without_calling_provider() -> None:
    provider = FakeProvider(text="irrelevant")
    outcome = await AIGateway(provider).invoke(prompt="x", action="translate")

    assert not outcome.success
    assert "Unsupported AI action" in outcome.error
    assert provider.calls == []


@pytest.mark.asyncio
async def test_improve_resume_keeps_identity_fields() -> None:
    resume = Resume(
        title="Mine",
        personal_info=PersonalInfo(name="Jane", summary="Did stuff"),
        skills=["Go"],
        template_type="classic",
        id="res_123",
    )

    improved = await AIGateway(StubProvider()).improve_resume(resume)

    assert improved.id == "res_123"
    assert improved.title == "Mine"
    assert improved.template_type == "classic"
    assert improved.personal_info.name == "Jane"
    assert improved.skills == ["Go"]


@pytest.mark.asyncio
async def test_generate_resume_returns_resume_value() -> None:
    resume = await AIGateway(StubProvider()).generate_resume("Data engineer in Berlin")
    assert resume.personal_info.summary == "Data engineer in Berlin"
    assert resume.id is None


def test_ai_request_log_redacts_prompt(caplog) -> None:
    import asyncio

    caplog.set_level("INFO", logger="resume_builder.ai_gateway")
    gateway = AIGateway(FakeProvider(text="ok"))

    asyncio.run(gateway.run(prompt="Contact me at jane@example.com", action="answer_query"))

    messages = [record.getMessage() for record in caplog.records if record.name == "resume_builder.ai_gateway"]
    assert any("ai_request action=answer_query model=fake-model" in message for message in messages)
    assert all("jane@example.com" not in message for message in messages)


def test_ai_request_log_reports_token_usage(caplog) -> None:
    import asyncio

    class MeteredProvider(FakeProvider):
        async def generate(self, messages: List[Message], config: GenerationConfig) -> LLMResponse:
            self.calls.append((messages, config))
            return LLMResponse(text="ok", usage={"prompt_tokens": 4, "completion_tokens": 8, "total_tokens": 12})

    caplog.set_level("INFO", logger="resume_builder.ai_gateway")
    asyncio.run(AIGateway(MeteredProvider()).run(prompt="hi", action="answer_query"))

    messages = [record.getMessage() for record in caplog.records if record.name == "resume_builder.ai_gateway"]
    assert any("total_tokens=12" in message for message in messages)


def test_parse_resume_reply_stringifies_numeric_fields() -> None:
    reply = json.loads(json.dumps(VALID_REPLY))
    reply["education"][0]["year"] = 2020
    reply["experience"][0]["duration"] = 1.5

    data = parse_resume_reply(json.dumps(reply))

    assert data["education"][0]["year"] == "2020"
    assert data["experience"][0]["duration"] == "1.5"


def test_parse_resume_reply_still_rejects_non_scalar_fields() -> None:
    reply = json.loads(json.dumps(VALID_REPLY))
    reply["education"][0]["year"] = {"from": 2018}

    with pytest.raises(AIValidationError, match="education.0.year"):
        parse_resume_reply(json.dumps(reply))
