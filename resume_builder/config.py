"""Configuration loading for the CLI (YAML) and the web server (environment)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .providers import default_model

ENV_PREFIX = "RESUME_BUILDER_"
DEFAULT_CONFIG_PATH = "config/config.local.yaml"
_REPO_ROOT = Path(__file__).resolve().parents[1]


@dataclass
class AIConfig:
    """Settings for the language model behind the AI gateway."""

    provider: str = "stub"
    model: str = ""
    api_key: str = ""
    api_base: str = ""
    max_tokens: int = 2000
    temperature: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AIConfig":
        provider = str(data.get("provider") or "stub").lower()
        temperature = data.get("temperature")
        return cls(
            provider=provider,
            model=str(data.get("model") or default_model(provider)),
            api_key=str(data.get("api_key") or ""),
            api_base=str(data.get("api_base") or ""),
            max_tokens=int(data.get("max_tokens") or 2000),
            temperature=float(temperature) if temperature is not None else None,
        )


def _resolve(candidate: str) -> Path:
    path = Path(candidate)
    if path.exists():
        return path
    alt = _REPO_ROOT / candidate
    if alt.exists():
        return alt
    return path


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must be a mapping: {path}")
    return data


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        base_value = merged.get(key)
        if isinstance(base_value, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(base_value, value)
        else:
            merged[key] = value
    return merged


def load_raw_config(config_path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """Load the raw configuration mapping.

    With the default path, ``config/config.yaml`` is loaded first and
    ``config/config.local.yaml`` (secrets, local overrides) is laid over it.
    An explicit other path is loaded as-is.
    """
    target = _resolve(config_path)
    if Path(config_path).name == "config.local.yaml":
        base = _load_yaml(_resolve("config/config.yaml"))
        merged = _deep_merge(base, _load_yaml(target))
        if not merged:
            raise FileNotFoundError(f"Config file not found: {config_path} (also missing fallback config/config.yaml)")
        return merged

    data = _load_yaml(target)
    if not data:
        raise FileNotFoundError(f"Config file not found: {config_path}")
    return data


def _env(name: str, default: str = "") -> str:
    return os.getenv(f"{ENV_PREFIX}{name}", default).strip()


def ai_config_from_env() -> Dict[str, Any]:
    """Raw AI settings from ``RESUME_BUILDER_AI_*`` variables, shaped like the YAML file."""
    raw: Dict[str, Any] = {"provider": _env("AI_PROVIDER", "stub") or "stub"}
    for key in ("model", "api_key", "api_base"):
        value = _env(f"AI_{key.upper()}")
        if value:
            raw[key] = value

    max_tokens = _env("AI_MAX_TOKENS")
    if max_tokens:
        try:
            raw["max_tokens"] = int(max_tokens)
        except ValueError:
            raw["max_tokens"] = max_tokens

    temperature = _env("AI_TEMPERATURE")
    if temperature:
        try:
            raw["temperature"] = float(temperature)
        except ValueError:
            raw["temperature"] = temperature
    return raw
