"""FastAPI app entrypoint for Resume Builder web APIs."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from hmac import compare_digest
from pathlib import Path
from time import perf_counter
from typing import List, Tuple

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from ..ai_gateway import AIGateway
from ..config import ENV_PREFIX, AIConfig, ai_config_from_env
from ..config_validator import Severity, has_errors, validate_config
from ..contracts.runtime import DEFAULT_ALLOWED_UPLOAD_MIME_TYPES, DEFAULT_MAX_UPLOAD_BYTES
from ..domain.resume_renderer import DEFAULT_FONTS, register_ttf_fonts
from ..providers import create_provider
from .api.v1.deps import DEFAULT_USER_ID
from .api.v1.router import api_v1_router
from .errors import APIError, api_error_handler, validation_error_handler
from .file_storage import LocalFileStorageProvider
from .sqlite_store import SQLiteResumeStore
from .store import InMemoryResumeStore
from .store_protocol import ResumeStore

logger = logging.getLogger("resume_builder.web.api")


def _env(name: str, default: str = "") -> str:
    return os.getenv(f"{ENV_PREFIX}{name}", default).strip()


def _parse_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _build_ai_gateway() -> Tuple[AIConfig, AIGateway]:
    raw = ai_config_from_env()
    issues = validate_config(raw)
    for issue in issues:
        if issue.severity == Severity.WARNING:
            logger.warning("config_warning field=%s message=%s", issue.field, issue.message)
    if has_errors(issues):
        details = "; ".join(f"{i.field}: {i.message}" for i in issues if i.severity == Severity.ERROR)
        raise ValueError(f"Invalid AI configuration: {details}")

    config = AIConfig.from_dict(raw)
    provider = create_provider(
        config.provider,
        api_key=config.api_key,
        model=config.model,
        api_base=config.api_base,
    )
    return config, AIGateway(provider, max_tokens=config.max_tokens, temperature=config.temperature)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    auth_mode = _env("WEB_AUTH_MODE", "off").lower()
    api_token = _env("WEB_API_TOKEN")
    db_path = _env("WEB_DB_PATH")
    upload_root = Path(_env("WEB_UPLOAD_ROOT", "workspace/uploads")).resolve()
    max_upload_bytes = int(_env("WEB_MAX_UPLOAD_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES)))
    allowed_upload_mime_types = _parse_list(
        _env("WEB_ALLOWED_UPLOAD_MIME_TYPES", ",".join(DEFAULT_ALLOWED_UPLOAD_MIME_TYPES))
    )

    store: ResumeStore
    if db_path:
        store = SQLiteResumeStore(Path(db_path).resolve())
    else:
        store = InMemoryResumeStore()
    file_storage = LocalFileStorageProvider(
        upload_root,
        max_upload_bytes=max_upload_bytes,
        allowed_mime_types=allowed_upload_mime_types,
    )
    pdf_font = _env("PDF_FONT")
    pdf_fonts = register_ttf_fonts(pdf_font, _env("PDF_FONT_BOLD") or None) if pdf_font else DEFAULT_FONTS
    ai_config, gateway = _build_ai_gateway()

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        await store.start()
        try:
            yield
        finally:
            await store.stop()

    app = FastAPI(title="Resume Builder API", version="0.1.0", lifespan=lifespan)
    app.state.resume_store = store
    app.state.file_storage = file_storage
    app.state.ai_gateway = gateway
    app.state.pdf_fonts = pdf_fonts
    app.include_router(api_v1_router)

    @app.middleware("http")
    async def auth_and_user_middleware(request: Request, call_next):
        if not request.url.path.startswith("/api/v1"):
            return await call_next(request)

        user_id = (request.headers.get("X-User-ID") or "").strip()
        if auth_mode == "token":
            if not api_token:
                return APIError(
                    500,
                    "SERVER_MISCONFIGURED",
                    "API token auth is enabled but token is missing",
                ).to_response()

            auth_header = (request.headers.get("Authorization") or "").strip()
            if not auth_header.startswith("Bearer "):
                return APIError(401, "UNAUTHORIZED", "Missing bearer token").to_response()
            token = auth_header[len("Bearer ") :].strip()
            if not compare_digest(token, api_token):
                return APIError(401, "UNAUTHORIZED", "Invalid bearer token").to_response()
            if not user_id:
                return APIError(400, "BAD_REQUEST", "X-User-ID header is required").to_response()
        else:
            user_id = user_id or DEFAULT_USER_ID

        request.state.user_id = user_id
        return await call_next(request)

    def _log_request(request: Request, status_code: int, start: float) -> None:
        duration_ms = (perf_counter() - start) * 1000
        logger.info(
            "api_request method=%s path=%s status=%s duration_ms=%.2f user_id=%s provider=%s model=%s",
            request.method,
            request.url.path,
            status_code,
            duration_ms,
            getattr(request.state, "user_id", "-"),
            ai_config.provider,
            gateway.model_name,
        )

    # registered last so it wraps the auth middleware
    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        start = perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            _log_request(request, 500, start)
            raise
        _log_request(request, response.status_code, start)
        return response

    @app.get("/healthz", tags=["system"])
    async def healthz() -> dict:
        return {"status": "ok", "store": store.backend_name}

    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    return app


def main(host: str = "127.0.0.1", port: int = 8000) -> None:
    """Run development API server."""
    import uvicorn

    uvicorn.run("resume_builder.web.app:create_app", host=host, port=port, factory=True)
