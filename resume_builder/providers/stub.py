"""Deterministic offline provider used by default and in tests."""

from __future__ import annotations

import json
from typing import List

from .types import GenerationConfig, LLMResponse, Message


class StubProvider:
    """Echo-style provider that never touches the network.

    JSON requests get a resume-shaped object: an incoming resume JSON is
    echoed back, any other prompt becomes the summary of an empty resume.
    Text requests get a fixed advisory reply quoting the question.
    """

    def __init__(self, model: str = "stub-model") -> None:
        self.model = model

    async def generate(
        self,
        messages: List[Message],
        config: GenerationConfig,
    ) -> LLMResponse:
        prompt = messages[-1].text if messages else ""
        if config.json_output:
            text = json.dumps(self._resume_reply(prompt), ensure_ascii=False)
        else:
            text = f"Stub advisor: {prompt.strip()}"
        return LLMResponse(text=text, usage={"prompt_tokens": 0, "completion_tokens": 0, "total_tokens": 0})

    @staticmethod
    def _resume_reply(prompt: str) -> dict:
        try:
            parsed = json.loads(prompt)
        except ValueError:
            parsed = None
        if isinstance(parsed, dict) and "personal_info" in parsed:
            return {
                "personal_info": parsed.get("personal_info") or {},
                "education": parsed.get("education") or [],
                "experience": parsed.get("experience") or [],
                "skills": parsed.get("skills") or [],
            }
        return {
            "personal_info": {"name": "", "email": "", "phone": "", "location": "", "summary": prompt.strip()},
            "education": [],
            "experience": [],
            "skills": [],
        }
