"""Provider factory and defaults."""

from __future__ import annotations

import os
from typing import Dict

from .base import ChatProvider
from .gemini import GeminiProvider
from .openai_compat import OpenAICompatibleProvider
from .stub import StubProvider
from .types import GenerationConfig, LLMResponse, Message

PROVIDER_DEFAULTS: Dict[str, Dict[str, str]] = {
    "openai": {"api_base": "", "env_key": "OPENAI_API_KEY", "model": "gpt-4.1"},
    "gemini": {"api_base": "", "env_key": "GEMINI_API_KEY", "model": "gemini-2.5-flash"},
    "deepseek": {"api_base": "https://api.deepseek.com", "env_key": "DEEPSEEK_API_KEY", "model": "deepseek-chat"},
    "stub": {"api_base": "", "env_key": "", "model": "stub-model"},
}


def default_model(provider: str) -> str:
    return PROVIDER_DEFAULTS.get((provider or "").lower(), {}).get("model", "")


def create_provider(
    provider: str,
    api_key: str = "",
    model: str = "",
    api_base: str = "",
) -> ChatProvider:
    provider_name = (provider or "stub").lower()
    model = model or default_model(provider_name)

    if provider_name == "stub":
        return StubProvider(model=model or "stub-model")

    api_key = resolve_api_key(provider_name, api_key)

    if provider_name == "gemini":
        return GeminiProvider(api_key=api_key, model=model, api_base=api_base)

    defaults = PROVIDER_DEFAULTS.get(provider_name, {})
    base = api_base or defaults.get("api_base", "")
    return OpenAICompatibleProvider(api_key=api_key, model=model, api_base=base)


def resolve_api_key(provider: str, api_key: str) -> str:
    """Resolve a provider key from env, a literal value or a ``${VAR}`` placeholder."""
    defaults = PROVIDER_DEFAULTS.get(provider, {})
    env_key = defaults.get("env_key", "")
    api_key = api_key or ""

    if env_key:
        env_value = os.environ.get(env_key, "")
        if env_value:
            return env_value

    if api_key and not api_key.startswith("${"):
        return api_key

    if api_key.startswith("${") and api_key.endswith("}"):
        resolved = os.environ.get(api_key[2:-1], "")
        if resolved:
            return resolved

    if env_key:
        raise ValueError(f"{env_key} not set. Set the env var or add api_key to config/config.local.yaml")

    raise ValueError("API key not set. Set the env var or add api_key to config/config.local.yaml")


__all__ = [
    "ChatProvider",
    "GeminiProvider",
    "GenerationConfig",
    "LLMResponse",
    "Message",
    "OpenAICompatibleProvider",
    "PROVIDER_DEFAULTS",
    "StubProvider",
    "create_provider",
    "default_model",
    "resolve_api_key",
]
