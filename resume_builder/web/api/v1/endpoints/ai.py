"""AI gateway endpoint."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .....ai_gateway import AIGateway
from .....contracts.runtime import AIAction
from ....store import audit
from ..deps import get_ai_gateway, get_user_id

router = APIRouter(tags=["ai"])


class AIRequest(BaseModel):
    prompt: str = Field(min_length=1)
    action: AIAction


class AIResponse(BaseModel):
    success: bool
    result: Optional[Any] = None
    error: Optional[str] = None


@router.post("/ai", response_model=AIResponse, response_model_exclude_none=True)
async def run_ai_action(
    payload: AIRequest,
    gateway: AIGateway = Depends(get_ai_gateway),
    user_id: str = Depends(get_user_id),
) -> Any:
    outcome = await gateway.invoke(prompt=payload.prompt, action=payload.action)
    audit("ai_invoked", user_id, details={"action": payload.action, "success": outcome.success})
    if not outcome.success:
        return JSONResponse(status_code=502, content=outcome.to_dict())
    return outcome.to_dict()
