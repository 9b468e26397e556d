from __future__ import annotations

from pydantic import BaseModel, Field


class FavoriteRequest(BaseModel):
    tool_id: str = Field(..., min_length=1)


class FavoriteResult(BaseModel):
    success: bool
    error: str | None = None
    # True when the plan's favorite limit blocked the add
    limited: bool = False


class FavoriteOut(BaseModel):
    tool_id: str
    created_at: float
    name: str | None = None
