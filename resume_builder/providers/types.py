"""Provider-agnostic message and generation types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass
class Message:
    """Provider-agnostic chat message."""

    role: str  # "user" | "assistant"
    text: str

    @classmethod
    def user(cls, text: str) -> "Message":
        return cls(role="user", text=text)


@dataclass
class GenerationConfig:
    """Common generation settings passed to providers."""

    system_prompt: str = ""
    max_tokens: int = 2000
    temperature: Optional[float] = 0.7
    json_output: bool = False


@dataclass
class LLMResponse:
    """Normalized response from a provider."""

    text: str = ""
    usage: Optional[Dict[str, int]] = None
