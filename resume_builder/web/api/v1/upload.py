"""Upload helpers for request-size enforcement before full buffering."""

from __future__ import annotations

from fastapi import UploadFile

from ...errors import APIError

CHUNK_SIZE = 64 * 1024


async def read_upload_with_limit(file: UploadFile, max_bytes: int) -> bytes:
    """Read an upload stream, failing as soon as ``max_bytes`` is exceeded."""
    chunks: list[bytes] = []
    total = 0

    while True:
        chunk = await file.read(CHUNK_SIZE)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            raise APIError(
                422,
                "UPLOAD_TOO_LARGE",
                "Uploaded file exceeds size limit",
                {"max_upload_bytes": max_bytes},
            )
        chunks.append(chunk)

    if not total:
        raise APIError(400, "BAD_REQUEST", "Uploaded file is empty")
    return b"".join(chunks)
