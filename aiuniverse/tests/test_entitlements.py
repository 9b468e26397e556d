from __future__ import annotations

import pytest
from pydantic import ValidationError

from aiuniverse.entitlements.models import Feature, SubscriptionTier
from aiuniverse.entitlements.policy import (
    FAVORITE_LIMIT_MESSAGE,
    cap_visible,
    check_favorite_limit,
    has_feature,
    parse_tier,
    resolve_policy,
)

# ── Policy table ─────────────────────────────────────────────────────────


class TestResolvePolicy:
    def test_free_policy(self):
        policy = resolve_policy(SubscriptionTier.free)
        assert policy.max_favorites == 3
        assert policy.max_tools_visible == 100
        assert policy.max_news_visible == 5
        assert not policy.can_write_reviews
        assert not policy.can_compare
        assert not policy.can_submit_tools
        assert not policy.has_analytics
        assert not policy.has_recommendation_chat
        assert not policy.has_priority_support

    def test_plus_policy(self):
        policy = resolve_policy(SubscriptionTier.plus)
        assert policy.max_favorites is None
        assert policy.max_tools_visible is None
        assert policy.can_write_reviews
        assert policy.can_compare
        assert policy.can_submit_tools
        # Pro-only features are not inherited by plus
        assert not policy.has_analytics
        assert not policy.has_recommendation_chat
        assert not policy.has_priority_support

    def test_pro_policy(self):
        policy = resolve_policy(SubscriptionTier.pro)
        assert policy.max_favorites is None
        assert policy.max_tools_visible is None
        assert policy.can_write_reviews
        assert policy.can_compare
        assert policy.can_submit_tools
        assert policy.has_analytics
        assert policy.has_recommendation_chat
        assert policy.has_priority_support

    @pytest.mark.parametrize("tier", list(SubscriptionTier))
    def test_total_and_deterministic(self, tier):
        first = resolve_policy(tier)
        second = resolve_policy(tier)
        assert first == second
        assert first.tier == tier

    def test_policy_is_immutable(self):
        policy = resolve_policy(SubscriptionTier.free)
        with pytest.raises(ValidationError):
            policy.max_favorites = 10


# ── Favorite limit ───────────────────────────────────────────────────────


class TestFavoriteLimit:
    @pytest.mark.parametrize("count", [0, 1, 2])
    def test_free_under_limit(self, count):
        result = check_favorite_limit(SubscriptionTier.free, count)
        assert result.allowed
        assert result.message is None
        assert result.max_count == 3

    def test_free_at_limit(self):
        result = check_favorite_limit(SubscriptionTier.free, 3)
        assert not result.allowed
        assert result.message == FAVORITE_LIMIT_MESSAGE
        assert "Upgrade" in result.message

    @pytest.mark.parametrize("tier", [SubscriptionTier.plus, SubscriptionTier.pro])
    @pytest.mark.parametrize("count", [0, 3, 250, 10_000])
    def test_paid_plans_unlimited(self, tier, count):
        result = check_favorite_limit(tier, count)
        assert result.allowed
        assert result.max_count is None
        assert result.current_count == count


# ── Helpers ──────────────────────────────────────────────────────────────


class TestHelpers:
    def test_parse_tier_known_values(self):
        assert parse_tier("pro") is SubscriptionTier.pro
        assert parse_tier(" PLUS ") is SubscriptionTier.plus
        assert parse_tier(SubscriptionTier.free) is SubscriptionTier.free

    def test_parse_tier_falls_back_to_free(self):
        assert parse_tier(None) is SubscriptionTier.free
        assert parse_tier("") is SubscriptionTier.free
        assert parse_tier("enterprise") is SubscriptionTier.free

    def test_has_feature(self):
        assert has_feature(SubscriptionTier.plus, Feature.compare)
        assert not has_feature(SubscriptionTier.free, Feature.compare)
        assert not has_feature(SubscriptionTier.plus, Feature.recommendation_chat)
        assert has_feature(SubscriptionTier.pro, Feature.recommendation_chat)

    def test_cap_visible(self):
        items = list(range(150))
        assert len(cap_visible(items, 100)) == 100
        assert len(cap_visible(items, None)) == 150
        assert cap_visible([], 3) == []
