"""Auth middleware, startup configuration, audit log and redaction tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from resume_builder.redaction import redact_for_log, redact_text
from resume_builder.web.app import create_app


@pytest.fixture(autouse=True)
def _upload_root(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RESUME_BUILDER_WEB_UPLOAD_ROOT", str(tmp_path / "uploads"))


def test_token_auth_requires_valid_bearer_and_user(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RESUME_BUILDER_WEB_AUTH_MODE", "token")
    monkeypatch.setenv("RESUME_BUILDER_WEB_API_TOKEN", "secret-token")

    with TestClient(create_app()) as client:
        assert client.get("/healthz").status_code == 200

        missing = client.get("/api/v1/resumes")
        assert missing.status_code == 401
        assert missing.json()["error"]["code"] == "UNAUTHORIZED"

        wrong = client.get("/api/v1/resumes", headers={"Authorization": "Bearer nope"})
        assert wrong.status_code == 401

        no_user = client.get("/api/v1/resumes", headers={"Authorization": "Bearer secret-token"})
        assert no_user.status_code == 400
        assert no_user.json()["error"]["code"] == "BAD_REQUEST"

        ok = client.get(
            "/api/v1/resumes",
            headers={"Authorization": "Bearer secret-token", "X-User-ID": "alice"},
        )
        assert ok.status_code == 200


def test_token_auth_without_configured_token_is_misconfigured(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RESUME_BUILDER_WEB_AUTH_MODE", "token")

    with TestClient(create_app()) as client:
        response = client.get("/api/v1/resumes", headers={"Authorization": "Bearer x"})
        assert response.status_code == 500
        assert response.json()["error"]["code"] == "SERVER_MISCONFIGURED"


def test_create_app_refuses_invalid_ai_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RESUME_BUILDER_AI_PROVIDER", "openai")
    with pytest.raises(ValueError, match="OPENAI_API_KEY"):
        create_app()

    monkeypatch.setenv("RESUME_BUILDER_AI_PROVIDER", "stub")
    monkeypatch.setenv("RESUME_BUILDER_AI_TEMPERATURE", "5")
    with pytest.raises(ValueError, match="temperature"):
        create_app()


def test_create_app_with_openai_provider_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RESUME_BUILDER_AI_PROVIDER", "openai")
    monkeypatch.setenv("RESUME_BUILDER_AI_API_KEY", "sk-test-abcdefghijk")
    monkeypatch.setenv("RESUME_BUILDER_AI_MODEL", "gpt-4.1-mini")

    app = create_app()

    assert app.state.ai_gateway.model_name == "gpt-4.1-mini"
    assert app.state.ai_gateway.max_tokens == 2000


def test_request_log_line(caplog) -> None:
    caplog.set_level("INFO", logger="resume_builder.web.api")

    with TestClient(create_app()) as client:
        client.get("/api/v1/resumes", headers={"X-User-ID": "alice"})

    messages = [r.getMessage() for r in caplog.records if r.name == "resume_builder.web.api"]
    assert any(
        "api_request method=GET path=/api/v1/resumes status=200" in m
        and "user_id=alice provider=stub model=stub-model" in m
        for m in messages
    )


def test_audit_log_redacts_personal_data(caplog) -> None:
    caplog.set_level("INFO", logger="resume_builder.web.audit")

    with TestClient(create_app()) as client:
        client.put(
            "/api/v1/profile",
            json={"full_name": "Jane", "email": "jane@example.com", "avatar_url": ""},
            headers={"X-User-ID": "alice"},
        )
        created = client.post("/api/v1/resumes", json={"title": "Call +49 170 1234567"}).json()
        client.get(f"/api/v1/resumes/{created['id']}/export", params={"format": "docx"})

    messages = [r.getMessage() for r in caplog.records if r.name == "resume_builder.web.audit"]
    assert any("audit action=profile_updated user_id=alice" in m for m in messages)
    assert any("audit action=resume_created" in m for m in messages)
    assert any("audit action=resume_exported" in m and "'actual_format': 'txt'" in m for m in messages)
    joined = "\n".join(messages)
    assert "jane@example.com" not in joined
    assert "170 1234567" not in joined
    assert "[REDACTED_EMAIL]" in joined


def test_redact_text_masks_common_sensitive_patterns() -> None:
    raw = "Email jane@example.com, phone +86 130 3360 2037, key sk-1234567890abcdef, Bearer abc.def"
    masked = redact_text(raw)
    assert "jane@example.com" not in masked
    assert "130 3360 2037" not in masked
    assert "sk-1234567890abcdef" not in masked
    assert "abc.def" not in masked
    for marker in ("[REDACTED_EMAIL]", "[REDACTED_PHONE]", "[REDACTED_KEY]", "[REDACTED_TOKEN]"):
        assert marker in masked


def test_redact_text_caps_length() -> None:
    assert redact_text("a" * 300, max_length=10) == "aaaaaaaaaa..."


def test_redact_for_log_drops_credential_keys() -> None:
    redacted = redact_for_log({"api_key": "plain", "nested": [{"email": "x@y.io"}], "count": 3})
    assert redacted == {"api_key": "[REDACTED]", "nested": [{"email": "[REDACTED_EMAIL]"}], "count": 3}
