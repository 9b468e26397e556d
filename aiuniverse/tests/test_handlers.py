from __future__ import annotations

import math

from aiuniverse.catalog.models import Category, ToolRecord
from aiuniverse.chat import handlers
from aiuniverse.chat.models import UserRequirements


def _tool(tool_id: str, name: str, pricing: str = "Free", **kwargs) -> ToolRecord:
    return ToolRecord(id=tool_id, name=name, pricing_type=pricing, **kwargs)


CATALOG = [
    _tool("1", "WriteBot", "Free", rating=4.2, views=500, description="Writing helper", tags=["writing"]),
    _tool("2", "PixelForge", "Paid", rating=4.9, views=20000, description="Image generation", tags=["image"]),
    _tool("3", "DataLens", "Freemium", rating=4.5, views=3000, description="Analytics dashboard",
          long_description="Real-time reporting", tags=["analytics", "dashboard"],
          category=Category(name="Data"), featured=True),
    _tool("4", "SpeakEasy", "Free", rating=4.7, views=800, description="Speech to text", tags=["speech"]),
    _tool("5", "CodePal", "Trial", rating=3.9, views=1200, description="Code completion"),
]


# ── Budget ───────────────────────────────────────────────────────────────


class TestBudgetHandler:
    def test_no_free_tools_returns_apology(self):
        paid_only = [t for t in CATALOG if t.pricing_type.value == "Paid"]
        reply = handlers.handle_budget("show me free tools", paid_only)
        assert reply == handlers.BUDGET_NO_MATCH

    def test_free_tools_sorted_by_rating(self):
        reply = handlers.handle_budget("show me free tools", CATALOG)
        assert reply.startswith("I found 2 free tools for you.")
        assert reply.index("SpeakEasy") < reply.index("WriteBot")
        assert "1. SpeakEasy - Free (★ 4.7)" in reply
        assert "PixelForge" not in reply

    def test_freemium_when_free_and_paid_mentioned(self):
        reply = handlers.handle_budget("cost of free vs paid plans", CATALOG)
        assert "I found 1 freemium tools" in reply
        assert "DataLens" in reply

    def test_all_pricing_types_without_keyword(self):
        reply = handlers.handle_budget("what's my budget", CATALOG)
        assert reply.startswith("I found 5 tools for you.")
        # Top 5 by rating, highest first
        assert reply.index("PixelForge") < reply.index("SpeakEasy") < reply.index("DataLens")

    def test_caps_at_five(self):
        many = [_tool(str(i), f"Tool{i}", "Free", rating=i / 10) for i in range(10)]
        reply = handlers.handle_budget("free", many)
        assert "5. " in reply
        assert "6. " not in reply


# ── Features ─────────────────────────────────────────────────────────────


class TestFeaturesHandler:
    def test_asks_when_no_feature_named(self):
        assert handlers.handle_features("what features matter", CATALOG) == handlers.FEATURES_ASK

    def test_matches_long_description_and_tags(self):
        reply = handlers.handle_features("does it do real-time reporting", CATALOG)
        assert "DataLens" in reply
        assert "real-time, reporting" in reply

    def test_matches_tags_case_insensitive(self):
        tools = [_tool("9", "Voicey", tags=["SPEECH"])]
        reply = handlers.handle_features("speech feature", tools)
        assert "Voicey" in reply

    def test_no_match(self):
        reply = handlers.handle_features("mobile feature", CATALOG)
        assert reply == handlers.FEATURES_NO_MATCH

    def test_missing_description_does_not_raise(self):
        tools = [_tool("9", "Bare")]
        assert handlers.handle_features("api feature", tools) == handlers.FEATURES_NO_MATCH


# ── Comparison ───────────────────────────────────────────────────────────


class TestComparisonHandler:
    def test_two_known_tools(self):
        reply = handlers.handle_comparison("compare writebot and datalens", CATALOG)
        assert "**WriteBot**" in reply
        assert "**DataLens**" in reply
        assert "- Category: Data" in reply
        assert "- Category: N/A" in reply

    def test_one_known_one_unknown(self):
        reply = handlers.handle_comparison("compare WriteBot and NotARealTool", CATALOG)
        assert reply == handlers.COMPARISON_NEED_TWO

    def test_same_tool_twice_is_not_enough(self):
        reply = handlers.handle_comparison("writebot vs writebot", CATALOG)
        assert reply == handlers.COMPARISON_NEED_TWO


# ── Recommendation ───────────────────────────────────────────────────────


class TestRecommendationHandler:
    def test_composite_score(self):
        a = _tool("a", "Alpha", rating=5.0, views=0)
        b = _tool("b", "Beta", rating=4.0, views=10000)
        assert handlers.recommendation_score(a) == 10.0
        assert math.isclose(handlers.recommendation_score(b), 8 + math.log10(10001))

    def test_higher_score_ranks_first(self):
        a = _tool("a", "Alpha", rating=5.0, views=0)
        b = _tool("b", "Beta", rating=4.0, views=10000)
        reply = handlers.handle_recommendation("any", UserRequirements(), [a, b])
        assert reply.index("Beta") < reply.index("Alpha")

    def test_budget_filter(self):
        reply = handlers.handle_recommendation("any", UserRequirements(budget="Free"), CATALOG)
        assert "SpeakEasy" in reply
        assert "WriteBot" in reply
        assert "PixelForge" not in reply

    def test_budget_all_keeps_everything(self):
        reply = handlers.handle_recommendation("any", UserRequirements(budget="all"), CATALOG)
        assert "PixelForge" in reply
        assert "CodePal" in reply

    def test_keyword_filter(self):
        reply = handlers.handle_recommendation("recommend writing", UserRequirements(), CATALOG)
        assert "WriteBot" in reply
        assert "PixelForge" not in reply

    def test_no_match(self):
        reply = handlers.handle_recommendation("recommend spaceships", UserRequirements(), CATALOG)
        assert reply == handlers.RECOMMENDATION_NO_MATCH

    def test_views_are_grouped(self):
        reply = handlers.handle_recommendation("image", UserRequirements(), CATALOG)
        assert "Views: 20,000" in reply

    def test_reason_all_signals(self):
        tool = _tool("x", "Star", "Free", rating=4.8, views=5000, featured=True)
        reason = handlers.recommendation_reason(tool, UserRequirements(budget="Free"))
        assert reason == "highly rated by users, popular choice, matches your budget, featured tool"

    def test_reason_default(self):
        tool = _tool("x", "Quiet", "Paid", rating=3.0, views=10)
        assert handlers.recommendation_reason(tool, UserRequirements(budget="Free")) == "fits your requirements"


# ── Fixed templates ──────────────────────────────────────────────────────


class TestTemplates:
    def test_integration_echoes_platforms(self):
        reply = handlers.handle_integration("integrate with slack and salesforce")
        assert "slack, salesforce" in reply

    def test_integration_asks_when_none(self):
        assert handlers.handle_integration("integrate with my stuff") == handlers.INTEGRATION_ASK

    def test_greeting_lists_five_capabilities(self):
        bullets = [line for line in handlers.handle_greeting().splitlines() if line.startswith("- ")]
        assert len(bullets) == 5

    def test_setup_asks_three_questions(self):
        reply = handlers.handle_setup()
        assert "1. " in reply and "2. " in reply and "3. " in reply

    def test_general_menu(self):
        assert "Tool Discovery" in handlers.handle_general()
