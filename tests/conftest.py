"""Global pytest fixtures for deterministic test environment."""

from __future__ import annotations

import os

import pytest

_PROVIDER_KEYS = ("OPENAI_API_KEY", "GEMINI_API_KEY", "DEEPSEEK_API_KEY")


@pytest.fixture(autouse=True)
def _isolate_runtime_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear local runtime env that can leak into tests on developer machines."""
    for key in list(os.environ):
        if key.startswith("RESUME_BUILDER_"):
            monkeypatch.delenv(key, raising=False)
    for key in _PROVIDER_KEYS:
        monkeypatch.delenv(key, raising=False)
