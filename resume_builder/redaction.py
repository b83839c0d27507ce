"""Log redaction helpers for resume content and credentials."""

from __future__ import annotations

import re
from typing import Any, Pattern, Tuple

EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PHONE_RE = re.compile(r"(?:(?:\+?\d[\d\s().-]{7,}\d))")
SECRET_RE = re.compile(r"\b(?:sk|rk)-[A-Za-z0-9_-]{8,}\b|\bAIza[A-Za-z0-9_-]{20,}\b")
BEARER_RE = re.compile(r"(?i)\bbearer\s+[A-Za-z0-9._~+/=-]+")

# Order matters: secrets before phones, since keys can contain digit runs.
_RULES: Tuple[Tuple[Pattern[str], str], ...] = (
    (EMAIL_RE, "[REDACTED_EMAIL]"),
    (BEARER_RE, "Bearer [REDACTED_TOKEN]"),
    (SECRET_RE, "[REDACTED_KEY]"),
    (PHONE_RE, "[REDACTED_PHONE]"),
)

SENSITIVE_KEYS = frozenset({"api_key", "authorization", "token", "password"})


def redact_text(value: str, max_length: int = 200) -> str:
    redacted = value or ""
    for pattern, replacement in _RULES:
        redacted = pattern.sub(replacement, redacted)
    if len(redacted) > max_length:
        return f"{redacted[:max_length]}..."
    return redacted


def redact_for_log(value: Any) -> Any:
    """Recursively redact strings; values under credential-like keys are dropped."""
    if isinstance(value, str):
        return redact_text(value)
    if isinstance(value, dict):
        return {
            str(key): "[REDACTED]" if str(key).lower() in SENSITIVE_KEYS else redact_for_log(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return type(value)(redact_for_log(item) for item in value)
    return value
