"""Gemini provider implementation."""

from __future__ import annotations

import asyncio
from typing import List

from google import genai
from google.genai import types

from .types import GenerationConfig, LLMResponse, Message


class GeminiProvider:
    """Google Gemini provider using google-genai SDK."""

    def __init__(
        self,
        api_key: str,
        model: str,
        api_base: str = "",
    ) -> None:
        self.model = model
        # google-genai does not expose a stable api_base option; keep for future use
        _ = api_base
        self.client = genai.Client(api_key=api_key)

    async def generate(
        self,
        messages: List[Message],
        config: GenerationConfig,
    ) -> LLMResponse:
        contents = self._to_gemini_contents(messages)

        response = await asyncio.to_thread(
            self.client.models.generate_content,
            model=self.model,
            contents=contents,
            config=types.GenerateContentConfig(
                system_instruction=config.system_prompt if config.system_prompt else None,
                max_output_tokens=config.max_tokens,
                temperature=config.temperature,
                response_mime_type="application/json" if config.json_output else None,
            ),
        )

        return self._from_gemini_response(response)

    def _from_gemini_response(self, response) -> LLMResponse:
        if not response.candidates:
            raise RuntimeError("Empty LLM response: no candidates")

        candidate = response.candidates[0]
        parts = candidate.content.parts if candidate.content else []
        text_parts = [part.text for part in parts or [] if part.text]

        usage = None
        metadata = getattr(response, "usage_metadata", None)
        if metadata:
            usage = {
                "prompt_tokens": int(getattr(metadata, "prompt_token_count", 0) or 0),
                "completion_tokens": int(getattr(metadata, "candidates_token_count", 0) or 0),
                "total_tokens": int(getattr(metadata, "total_token_count", 0) or 0),
            }

        return LLMResponse(text="".join(text_parts).strip(), usage=usage)

    def _to_gemini_contents(self, messages: List[Message]) -> List[types.Content]:
        contents: List[types.Content] = []
        for msg in messages:
            role = "model" if msg.role == "assistant" else "user"
            contents.append(types.Content(role=role, parts=[types.Part.from_text(text=msg.text)]))
        return contents
