from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class PricingType(str, Enum):
    free = "Free"
    paid = "Paid"
    freemium = "Freemium"
    trial = "Trial"


class Category(BaseModel):
    name: str


class ToolRecord(BaseModel):
    id: str
    name: str
    description: str = ""
    long_description: str = ""
    pricing_type: PricingType
    rating: float = Field(default=0.0, ge=0.0, le=5.0)
    views: int = Field(default=0, ge=0)
    tags: list[str] = Field(default_factory=list)
    category: Category | None = None
    featured: bool = False


class ToolListResponse(BaseModel):
    tools: list[ToolRecord]
    total_published: int
    visible_limit: int | None = None


class CompareRequest(BaseModel):
    tool_ids: list[str] = Field(..., min_length=2, max_length=4)
    question: str | None = Field(default=None, max_length=500)


class CompareResponse(BaseModel):
    tools: list[ToolRecord]
    analysis: str
    generated_by: str
