"""Export downloads for stored and unsaved resumes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from .....contracts.resume import ResumePayload
from .....domain.exporter import ExportError, UnsupportedFormatError, export_resume
from .....domain.resume import Resume
from .....domain.resume_renderer import PdfFonts
from ....errors import APIError
from ....store import audit
from ....store_protocol import ResumeStore
from ..deps import get_pdf_fonts, get_store, get_user_id

router = APIRouter(tags=["export"])


def _export_response(resume: Resume, requested_format: str, user_id: str, fonts: PdfFonts) -> Response:
    try:
        result = export_resume(resume, requested_format, fonts)
    except UnsupportedFormatError as exc:
        raise APIError(
            422,
            "UNSUPPORTED_FORMAT",
            str(exc),
            {"requested_format": exc.requested_format},
        ) from exc
    except ExportError as exc:
        raise APIError(500, "EXPORT_FAILED", str(exc)) from exc

    audit(
        "resume_exported",
        user_id,
        resume.id,
        {
            "requested_format": result.requested_format,
            "actual_format": result.actual_format,
            "size": len(result.content),
        },
    )
    return Response(
        content=result.content,
        media_type=result.mime_type,
        headers={
            "Content-Disposition": f'attachment; filename="{result.filename}"',
            "X-Requested-Format": result.requested_format,
            "X-Export-Format": result.actual_format,
        },
    )


@router.get("/resumes/{resume_id}/export")
async def export_stored_resume(
    resume_id: str,
    format: str = Query("pdf"),
    store: ResumeStore = Depends(get_store),
    user_id: str = Depends(get_user_id),
    fonts: PdfFonts = Depends(get_pdf_fonts),
) -> Response:
    record = await store.get_resume(resume_id, user_id)
    return _export_response(record.resume, format, user_id, fonts)


@router.post("/export")
async def export_unsaved_resume(
    payload: ResumePayload,
    format: str = Query("pdf"),
    user_id: str = Depends(get_user_id),
    fonts: PdfFonts = Depends(get_pdf_fonts),
) -> Response:
    return _export_response(payload.to_resume(), format, user_id, fonts)
