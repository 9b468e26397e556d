from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


class Intent(str, Enum):
    greeting = "greeting"
    budget = "budget"
    features = "features"
    comparison = "comparison"
    recommendation = "recommendation"
    integration = "integration"
    setup = "setup"
    general = "general"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ChatMessage(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str
    timestamp: datetime = Field(default_factory=_utcnow)


class UserRequirements(BaseModel):
    use_case: str | None = None
    budget: str | None = None
    features: list[str] = Field(default_factory=list)
    industry: str | None = None
    team_size: str | None = None
    integrations: list[str] = Field(default_factory=list)


class TurnResult(BaseModel):
    intent: Intent
    message: str
    failed: bool = False


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=1000)


class ChatResponse(BaseModel):
    message: str
    intent: Intent
    requirements: UserRequirements
    history_length: int


class ChatHistoryResponse(BaseModel):
    messages: list[ChatMessage]
