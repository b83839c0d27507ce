"""Tests for configuration validator."""

import os
from unittest.mock import patch

from resume_builder.config_validator import (
    ConfigError,
    Severity,
    _resolve_api_key_value,
    has_errors,
    validate_config,
)


class TestValidateConfig:
    """Tests for validate_config()."""

    def _valid_config(self) -> dict:
        return {
            "provider": "openai",
            "api_key": "test-key-123",
            "model": "gpt-4.1",
            "temperature": 0.7,
            "max_tokens": 2000,
        }

    @patch.dict(os.environ, {}, clear=True)
    def test_valid_config_no_errors(self):
        assert validate_config(self._valid_config()) == []

    @patch.dict(os.environ, {}, clear=True)
    def test_stub_provider_needs_no_key(self):
        assert validate_config({"provider": "stub"}) == []

    @patch.dict(os.environ, {}, clear=True)
    def test_empty_config_defaults_to_stub(self):
        assert validate_config({}) == []

    @patch.dict(os.environ, {}, clear=True)
    def test_missing_api_key(self):
        config = self._valid_config()
        config["api_key"] = ""
        issues = validate_config(config)
        assert has_errors(issues)
        api_errors = [e for e in issues if e.field == "api_key"]
        assert len(api_errors) == 1
        assert "OPENAI_API_KEY" in api_errors[0].message

    @patch.dict(os.environ, {"OPENAI_API_KEY": "from-env"}, clear=True)
    def test_api_key_from_env(self):
        config = self._valid_config()
        config["api_key"] = ""
        assert not has_errors(validate_config(config))

    @patch.dict(os.environ, {"MY_KEY": "resolved"}, clear=True)
    def test_api_key_placeholder_resolved(self):
        config = self._valid_config()
        config["api_key"] = "${MY_KEY}"
        assert not has_errors(validate_config(config))

    @patch.dict(os.environ, {}, clear=True)
    def test_unresolved_placeholder_is_error(self):
        config = self._valid_config()
        config["api_key"] = "${MISSING_KEY}"
        assert has_errors(validate_config(config))

    @patch.dict(os.environ, {}, clear=True)
    def test_unknown_provider_is_warning(self):
        issues = validate_config({"provider": "acme", "api_key": "k"})
        assert not has_errors(issues)
        assert [(e.field, e.severity) for e in issues] == [("provider", Severity.WARNING)]

    @patch.dict(os.environ, {}, clear=True)
    def test_empty_model_is_error(self):
        config = self._valid_config()
        config["model"] = ""
        issues = validate_config(config)
        assert any(e.field == "model" for e in issues)

    @patch.dict(os.environ, {}, clear=True)
    def test_temperature_out_of_range(self):
        for bad in (-0.1, 2.5, "hot", True):
            config = self._valid_config()
            config["temperature"] = bad
            issues = validate_config(config)
            assert any(e.field == "temperature" for e in issues), bad

    @patch.dict(os.environ, {}, clear=True)
    def test_max_tokens_must_be_positive_int(self):
        for bad in (0, -5, "many", 1.5):
            config = self._valid_config()
            config["max_tokens"] = bad
            issues = validate_config(config)
            assert any(e.field == "max_tokens" for e in issues), bad


class TestResolveApiKeyValue:
    @patch.dict(os.environ, {"GEMINI_API_KEY": "env-key"}, clear=True)
    def test_env_var_takes_priority(self):
        assert _resolve_api_key_value("config-key", "GEMINI_API_KEY") == "env-key"

    @patch.dict(os.environ, {}, clear=True)
    def test_literal_and_empty(self):
        assert _resolve_api_key_value("literal") == "literal"
        assert _resolve_api_key_value("") == ""
        assert _resolve_api_key_value("${BROKEN") == ""


def test_has_errors_ignores_warnings():
    warning = ConfigError(field="provider", message="w", severity=Severity.WARNING)
    error = ConfigError(field="api_key", message="e", severity=Severity.ERROR)
    assert not has_errors([warning])
    assert has_errors([warning, error])
