"""Configuration validator for Resume Builder startup checks."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List

from .providers import PROVIDER_DEFAULTS


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass
class ConfigError:
    """A single configuration issue."""

    field: str
    message: str
    severity: Severity


def validate_config(raw_config: Dict[str, Any]) -> List[ConfigError]:
    """Validate raw AI configuration and return a list of issues.

    Args:
        raw_config: Raw config dict from YAML or the environment

    Returns:
        List of ConfigError (empty = valid)
    """
    errors: List[ConfigError] = []

    # --- Provider ---
    provider = raw_config.get("provider", "stub")
    if not isinstance(provider, str) or not provider:
        errors.append(
            ConfigError(
                field="provider",
                message="provider must be a non-empty string",
                severity=Severity.ERROR,
            )
        )
        provider = "stub"
    provider = provider.lower()

    if provider not in PROVIDER_DEFAULTS:
        errors.append(
            ConfigError(
                field="provider",
                message=f"Unknown provider '{provider}'. Expected one of: {', '.join(PROVIDER_DEFAULTS.keys())}",
                severity=Severity.WARNING,
            )
        )

    # --- API Key ---
    if provider != "stub":
        env_key = PROVIDER_DEFAULTS.get(provider, {}).get("env_key", "")
        if not _resolve_api_key_value(str(raw_config.get("api_key", "") or ""), env_key):
            message = (
                f"{env_key} not set. Set the env var or add api_key to config/config.local.yaml"
                if env_key
                else "API key not set. Set the env var or add api_key to config/config.local.yaml"
            )
            errors.append(ConfigError(field="api_key", message=message, severity=Severity.ERROR))

    # --- Model ---
    model = raw_config.get("model")
    if model is not None and (not model or not isinstance(model, str)):
        errors.append(
            ConfigError(
                field="model",
                message="model must be a non-empty string",
                severity=Severity.ERROR,
            )
        )

    # --- Temperature ---
    temperature = raw_config.get("temperature", 0.7)
    if (
        isinstance(temperature, bool)
        or not isinstance(temperature, (int, float))
        or temperature < 0
        or temperature > 2
    ):
        errors.append(
            ConfigError(
                field="temperature",
                message=f"temperature must be a number between 0 and 2, got {temperature}",
                severity=Severity.ERROR,
            )
        )

    # --- Max tokens ---
    max_tokens = raw_config.get("max_tokens", 2000)
    if isinstance(max_tokens, bool) or not isinstance(max_tokens, int) or max_tokens <= 0:
        errors.append(
            ConfigError(
                field="max_tokens",
                message=f"max_tokens must be a positive integer, got {max_tokens}",
                severity=Severity.ERROR,
            )
        )

    return errors


def _resolve_api_key_value(config_api_key: str, env_key: str = "") -> str:
    """Resolve API key from env or config value without side effects.

    Returns the resolved key string, or empty string if unresolvable.
    """
    if env_key:
        env_value = os.environ.get(env_key, "")
        if env_value:
            return env_value

    if not config_api_key:
        return ""

    if not config_api_key.startswith("${"):
        return config_api_key

    if config_api_key.endswith("}"):
        return os.environ.get(config_api_key[2:-1], "")

    return ""


def has_errors(issues: List[ConfigError]) -> bool:
    """Check if any issues are errors (not just warnings)."""
    return any(e.severity == Severity.ERROR for e in issues)
