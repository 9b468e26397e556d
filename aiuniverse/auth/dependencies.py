from __future__ import annotations

from typing import Callable

from fastapi import HTTPException, Request

from ..entitlements.models import Feature, SubscriptionTier
from ..entitlements.policy import has_feature, parse_tier

_FEATURE_LABELS: dict[Feature, str] = {
    Feature.write_reviews: "Writing reviews",
    Feature.compare: "Tool comparison",
    Feature.submit_tools: "Submitting tools",
    Feature.analytics: "Personal analytics",
    Feature.recommendation_chat: "AI Select",
    Feature.priority_support: "Priority support",
}


def get_current_user(request: Request) -> dict | None:
    """Return the user dict from the session, or ``None``."""
    return request.session.get("user")


def user_tier(user: dict | None) -> SubscriptionTier:
    return parse_tier(user.get("tier") if user else None)


def require_user(request: Request) -> dict:
    """Session user, or 401 for anonymous visitors."""
    user = get_current_user(request)
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def require_admin(request: Request) -> dict:
    """Session user with the admin role; 401 when anonymous, 403 for everyone else."""
    user = require_user(request)
    if user.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user


def require_feature(feature: Feature) -> Callable[[Request], dict]:
    """Build a dependency that raises 401 if logged out, 403 if the plan lacks ``feature``."""

    def dependency(request: Request) -> dict:
        user = require_user(request)
        if not has_feature(user_tier(user), feature):
            upgrade_to = "Plus" if has_feature(SubscriptionTier.plus, feature) else "Pro"
            raise HTTPException(
                status_code=403,
                detail=f"{_FEATURE_LABELS[feature]} requires the {upgrade_to} plan. Upgrade to unlock it.",
            )
        return user

    return dependency
