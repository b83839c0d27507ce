"""AI gateway: prompt + action tag -> validated resume data or free text.

Resume-producing actions must come back as JSON matching
:class:`~resume_builder.contracts.resume.GeneratedResume`; anything else is
rejected with :class:`AIValidationError` rather than handed to callers.
No retries -- a failed call is reported once and surfaced.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from time import perf_counter
from typing import Any, Dict, Optional

from pydantic import ValidationError

from .contracts.resume import GeneratedResume
from .contracts.runtime import AI_ACTIONS, STRUCTURED_AI_ACTIONS
from .domain.prompts import SYSTEM_PROMPTS
from .domain.resume import Resume
from .providers import ChatProvider, GenerationConfig, Message
from .redaction import redact_text

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


class AIGatewayError(Exception):
    """The language model call failed or the action is unknown."""


class AIValidationError(AIGatewayError):
    """The model reply does not match the resume schema."""


@dataclass
class AIResult:
    """Wire shape of an AI gateway reply: ``{success, result}`` or ``{success, error}``."""

    success: bool
    result: Any = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        if self.success:
            return {"success": True, "result": self.result}
        return {"success": False, "error": self.error or "Unknown error"}


def parse_resume_reply(text: str) -> Dict[str, Any]:
    """Parse and validate a model reply that should contain resume JSON."""
    candidate = (text or "").strip()
    fenced = _FENCED_JSON.match(candidate)
    if fenced:
        candidate = fenced.group(1)

    try:
        data = json.loads(candidate)
    except ValueError as exc:
        raise AIValidationError("Invalid JSON response from AI") from exc
    if not isinstance(data, dict):
        raise AIValidationError("AI response must be a JSON object")

    try:
        validated = GeneratedResume.model_validate(data)
    except ValidationError as exc:
        fields = sorted({".".join(str(part) for part in err["loc"]) for err in exc.errors()})
        raise AIValidationError(f"AI response does not match resume schema: {', '.join(fields)}") from exc
    return validated.model_dump()


class AIGateway:
    """Thin proxy from an action tag to one chat completion."""

    def __init__(
        self,
        provider: ChatProvider,
        max_tokens: int = 2000,
        temperature: Optional[float] = None,
    ) -> None:
        self.provider = provider
        self.max_tokens = max_tokens
        self.temperature = temperature

    @property
    def model_name(self) -> str:
        return getattr(self.provider, "model", "-")

    async def run(self, prompt: str, action: str) -> Any:
        """Execute one action. Raises :class:`AIGatewayError` on any failure."""
        if action not in AI_ACTIONS:
            raise AIGatewayError(f"Unsupported AI action: {action!r}")

        config = GenerationConfig(
            system_prompt=SYSTEM_PROMPTS[action],
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            json_output=action in STRUCTURED_AI_ACTIONS,
        )
        start = perf_counter()
        try:
            response = await self.provider.generate([Message.user(prompt)], config)
        except Exception as exc:
            raise AIGatewayError(f"Language model request failed: {exc}") from exc
        duration_ms = (perf_counter() - start) * 1000
        logger.info(
            "ai_request action=%s model=%s duration_ms=%.2f total_tokens=%s prompt=%s",
            action,
            self.model_name,
            duration_ms,
            (response.usage or {}).get("total_tokens", "-"),
            redact_text(prompt, max_length=80),
        )

        if action in STRUCTURED_AI_ACTIONS:
            return parse_resume_reply(response.text)
        return response.text

    async def invoke(self, prompt: str, action: str) -> AIResult:
        """Like :meth:`run` but reports failure as ``AIResult(success=False)``."""
        try:
            result = await self.run(prompt=prompt, action=action)
        except AIGatewayError as exc:
            logger.warning("ai_request_failed action=%s model=%s error=%s", action, self.model_name, exc)
            return AIResult(success=False, error=str(exc))
        return AIResult(success=True, result=result)

    async def generate_resume(self, prompt: str) -> Resume:
        return Resume.from_dict(await self.run(prompt=prompt, action="generate_resume"))

    async def improve_resume(self, resume: Resume) -> Resume:
        """Return an improved copy; id, title and template are kept from ``resume``."""
        payload = json.dumps(resume.to_dict(), ensure_ascii=False)
        improved = Resume.from_dict(await self.run(prompt=payload, action="improve_resume"))
        improved.id = resume.id
        improved.title = resume.title
        improved.template_type = resume.template_type
        return improved

    async def answer_query(self, question: str) -> str:
        return await self.run(prompt=question, action="answer_query")
