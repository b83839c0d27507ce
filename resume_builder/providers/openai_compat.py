"""OpenAI-compatible provider implementation."""

from __future__ import annotations

from typing import Any, Dict, List

from openai import AsyncOpenAI

from .types import GenerationConfig, LLMResponse, Message


class OpenAICompatibleProvider:
    """Provider for OpenAI-compatible chat completion APIs."""

    def __init__(
        self,
        api_key: str,
        model: str,
        api_base: str = "",
    ) -> None:
        self.model = model
        self.api_base = api_base or ""
        self.client = AsyncOpenAI(api_key=api_key, base_url=api_base or None)

    async def generate(
        self,
        messages: List[Message],
        config: GenerationConfig,
    ) -> LLMResponse:
        openai_messages = self._to_openai_messages(messages, config.system_prompt)
        kwargs = self._build_chat_kwargs(messages=openai_messages, config=config)
        completion = await self.client.chat.completions.create(**kwargs)
        return self._from_openai_completion(completion)

    def _build_chat_kwargs(
        self,
        messages: List[Dict[str, Any]],
        config: GenerationConfig,
    ) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
        }
        if config.max_tokens and config.max_tokens > 0:
            kwargs["max_tokens"] = config.max_tokens
        if config.temperature is not None:
            kwargs["temperature"] = config.temperature
        if config.json_output and not self.api_base:
            # only the first-party endpoint is known to honor json_object mode
            kwargs["response_format"] = {"type": "json_object"}
        return kwargs

    def _to_openai_messages(self, messages: List[Message], system_prompt: str) -> List[Dict[str, Any]]:
        result: List[Dict[str, Any]] = []
        if system_prompt:
            result.append({"role": "system", "content": system_prompt})
        for msg in messages:
            role = "assistant" if msg.role == "assistant" else "user"
            result.append({"role": role, "content": msg.text})
        return result

    def _from_openai_completion(self, completion) -> LLMResponse:
        if not completion.choices:
            raise RuntimeError("Empty LLM response: no choices")

        message = completion.choices[0].message
        text = self._normalize_message_content(getattr(message, "content", ""))

        usage_data = getattr(completion, "usage", None)
        usage = None
        if usage_data:
            usage = {
                "prompt_tokens": int(getattr(usage_data, "prompt_tokens", 0) or 0),
                "completion_tokens": int(getattr(usage_data, "completion_tokens", 0) or 0),
                "total_tokens": int(getattr(usage_data, "total_tokens", 0) or 0),
            }

        return LLMResponse(text=text, usage=usage)

    def _normalize_message_content(self, content: Any) -> str:
        if content is None:
            return ""
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            return "".join(self._extract_text_from_content_item(item) for item in content)
        return str(content)

    def _extract_text_from_content_item(self, item: Any) -> str:
        if item is None:
            return ""
        if isinstance(item, str):
            return item
        if isinstance(item, dict):
            return str(item.get("text", "") or "")
        return str(getattr(item, "text", "") or "")
