from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SubscriptionTier(str, Enum):
    free = "free"
    plus = "plus"
    pro = "pro"


class Feature(str, Enum):
    write_reviews = "write_reviews"
    compare = "compare"
    submit_tools = "submit_tools"
    analytics = "analytics"
    recommendation_chat = "recommendation_chat"
    priority_support = "priority_support"


class EntitlementPolicy(BaseModel):
    """Limits and feature flags for one tier. ``None`` limits mean unlimited."""

    model_config = ConfigDict(frozen=True)

    tier: SubscriptionTier
    max_favorites: int | None = Field(default=None, ge=0)
    max_tools_visible: int | None = Field(default=None, ge=0)
    max_news_visible: int | None = Field(default=None, ge=0)
    can_write_reviews: bool = False
    can_compare: bool = False
    can_submit_tools: bool = False
    has_analytics: bool = False
    has_recommendation_chat: bool = False
    has_priority_support: bool = False


class FavoriteLimit(BaseModel):
    allowed: bool
    current_count: int
    max_count: int | None = None
    message: str | None = None
