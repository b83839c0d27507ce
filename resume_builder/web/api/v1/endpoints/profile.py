"""Current user's profile."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from .....contracts.resume import ProfilePayload, ProfileResponse
from ....store import ProfileRecord
from ....store_protocol import ResumeStore
from ..deps import get_store, get_user_id

router = APIRouter(prefix="/profile", tags=["profile"])


def _to_response(record: ProfileRecord) -> ProfileResponse:
    return ProfileResponse(
        full_name=record.full_name,
        email=record.email,
        avatar_url=record.avatar_url,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


@router.get("", response_model=ProfileResponse)
async def get_profile(
    store: ResumeStore = Depends(get_store),
    user_id: str = Depends(get_user_id),
) -> ProfileResponse:
    return _to_response(await store.get_profile(user_id))


@router.put("", response_model=ProfileResponse)
async def update_profile(
    payload: ProfilePayload,
    store: ResumeStore = Depends(get_store),
    user_id: str = Depends(get_user_id),
) -> ProfileResponse:
    record = await store.upsert_profile(
        user_id,
        full_name=payload.full_name,
        email=payload.email,
        avatar_url=payload.avatar_url,
    )
    return _to_response(record)
