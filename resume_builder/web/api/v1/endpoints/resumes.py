"""Resume CRUD and file upload APIs, scoped to the current user."""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import Response

from .....contracts.resume import ResumeListResponse, ResumePayload, ResumeResponse
from .....domain.resume import Resume
from ....errors import APIError
from ....file_storage import FileStorageProvider
from ....store import ResumeRecord, audit
from ....store_protocol import ResumeStore
from ..deps import get_file_storage, get_store, get_user_id
from ..upload import read_upload_with_limit

router = APIRouter(prefix="/resumes", tags=["resumes"])

UPLOADED_TITLE_PREFIX = "Uploaded Resume - "


def to_resume_response(record: ResumeRecord) -> ResumeResponse:
    attachment = record.attachment
    return ResumeResponse(
        **record.resume.to_dict(),
        created_at=record.created_at,
        updated_at=record.updated_at,
        file_name=attachment.file_name if attachment else None,
        file_path=attachment.file_path if attachment else None,
        file_size=attachment.file_size if attachment else None,
        mime_type=attachment.mime_type if attachment else None,
    )


@router.get("", response_model=ResumeListResponse)
async def list_resumes(
    store: ResumeStore = Depends(get_store),
    user_id: str = Depends(get_user_id),
) -> ResumeListResponse:
    records = await store.list_resumes(user_id)
    return ResumeListResponse(items=[to_resume_response(record) for record in records])


@router.post("", response_model=ResumeResponse, status_code=status.HTTP_201_CREATED)
async def create_resume(
    payload: ResumePayload,
    store: ResumeStore = Depends(get_store),
    user_id: str = Depends(get_user_id),
) -> ResumeResponse:
    record = await store.save_resume(payload.to_resume(), user_id)
    return to_resume_response(record)


@router.post("/upload", response_model=ResumeResponse, status_code=status.HTTP_201_CREATED)
async def upload_resume(
    file: UploadFile = File(...),
    store: ResumeStore = Depends(get_store),
    file_storage: FileStorageProvider = Depends(get_file_storage),
    user_id: str = Depends(get_user_id),
) -> ResumeResponse:
    """Store the file and create a resume with empty sections pointing at it.

    The file content is not parsed.
    """
    mime_type = file_storage.check_mime_type(file.content_type)
    content = await read_upload_with_limit(file=file, max_bytes=file_storage.max_upload_bytes)
    filename = file.filename or "resume"
    attachment = await file_storage.write_file(user_id, filename, content, mime_type)
    try:
        record = await store.save_resume(Resume(title=f"{UPLOADED_TITLE_PREFIX}{filename}"), user_id, attachment)
    except Exception:
        await file_storage.delete_file(user_id, attachment.file_path)
        raise
    audit("resume_uploaded", user_id, record.resume_id, {"file_name": filename, "file_size": attachment.file_size})
    return to_resume_response(record)


@router.get("/{resume_id}", response_model=ResumeResponse)
async def get_resume(
    resume_id: str,
    store: ResumeStore = Depends(get_store),
    user_id: str = Depends(get_user_id),
) -> ResumeResponse:
    return to_resume_response(await store.get_resume(resume_id, user_id))


@router.get("/{resume_id}/file")
async def download_resume_file(
    resume_id: str,
    store: ResumeStore = Depends(get_store),
    file_storage: FileStorageProvider = Depends(get_file_storage),
    user_id: str = Depends(get_user_id),
) -> Response:
    """Return the originally uploaded file of a resume."""
    record = await store.get_resume(resume_id, user_id)
    attachment = record.attachment
    if attachment is None:
        raise APIError(404, "FILE_NOT_FOUND", f"Resume '{resume_id}' has no uploaded file")
    content = await file_storage.read_file(user_id, attachment.file_path)
    # stored names are "<token>-<ascii name>", safe for a header
    download_name = Path(attachment.file_path).name.split("-", 1)[-1]
    return Response(
        content=content,
        media_type=attachment.mime_type,
        headers={"Content-Disposition": f'attachment; filename="{download_name}"'},
    )


@router.put("/{resume_id}", response_model=ResumeResponse)
async def update_resume(
    resume_id: str,
    payload: ResumePayload,
    store: ResumeStore = Depends(get_store),
    user_id: str = Depends(get_user_id),
) -> ResumeResponse:
    record = await store.save_resume(payload.to_resume(resume_id), user_id)
    return to_resume_response(record)


@router.delete("/{resume_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_resume(
    resume_id: str,
    store: ResumeStore = Depends(get_store),
    file_storage: FileStorageProvider = Depends(get_file_storage),
    user_id: str = Depends(get_user_id),
) -> Response:
    record = await store.delete_resume(resume_id, user_id)
    if record.attachment:
        await file_storage.delete_file(user_id, record.attachment.file_path)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
