from __future__ import annotations

from typing import Sequence, TypeVar

from .models import EntitlementPolicy, FavoriteLimit, Feature, SubscriptionTier

T = TypeVar("T")

FAVORITE_LIMIT_MESSAGE = "Free plan limited to 3 favorites. Upgrade to favorite unlimited tools!"

# ---------------------------------------------------------------------------
# Tier table
# ---------------------------------------------------------------------------
# Analytics, recommendation chat and priority support are pro-only; plus does
# not inherit them.

POLICIES: dict[SubscriptionTier, EntitlementPolicy] = {
    SubscriptionTier.free: EntitlementPolicy(
        tier=SubscriptionTier.free,
        max_favorites=3,
        max_tools_visible=100,
        max_news_visible=5,
    ),
    SubscriptionTier.plus: EntitlementPolicy(
        tier=SubscriptionTier.plus,
        can_write_reviews=True,
        can_compare=True,
        can_submit_tools=True,
    ),
    SubscriptionTier.pro: EntitlementPolicy(
        tier=SubscriptionTier.pro,
        can_write_reviews=True,
        can_compare=True,
        can_submit_tools=True,
        has_analytics=True,
        has_recommendation_chat=True,
        has_priority_support=True,
    ),
}

_FEATURE_FLAGS: dict[Feature, str] = {
    Feature.write_reviews: "can_write_reviews",
    Feature.compare: "can_compare",
    Feature.submit_tools: "can_submit_tools",
    Feature.analytics: "has_analytics",
    Feature.recommendation_chat: "has_recommendation_chat",
    Feature.priority_support: "has_priority_support",
}


def parse_tier(value: str | SubscriptionTier | None) -> SubscriptionTier:
    """Normalise a stored plan name. Unknown or missing plans are treated as free."""
    if isinstance(value, SubscriptionTier):
        return value
    if not value:
        return SubscriptionTier.free
    try:
        return SubscriptionTier(str(value).strip().lower())
    except ValueError:
        return SubscriptionTier.free


def resolve_policy(tier: SubscriptionTier) -> EntitlementPolicy:
    return POLICIES[tier]


def has_feature(tier: SubscriptionTier, feature: Feature) -> bool:
    return bool(getattr(resolve_policy(tier), _FEATURE_FLAGS[feature]))


def check_favorite_limit(tier: SubscriptionTier, current_count: int) -> FavoriteLimit:
    """Decide whether one more favorite may be added at ``current_count``."""
    max_count = resolve_policy(tier).max_favorites
    if max_count is None:
        return FavoriteLimit(allowed=True, current_count=current_count, max_count=None)

    allowed = current_count < max_count
    return FavoriteLimit(
        allowed=allowed,
        current_count=current_count,
        max_count=max_count,
        message=None if allowed else FAVORITE_LIMIT_MESSAGE,
    )


def cap_visible(items: Sequence[T], limit: int | None) -> list[T]:
    if limit is None:
        return list(items)
    return list(items[:limit])
