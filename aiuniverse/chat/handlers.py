"""
Canned responses for each chat intent.

Handlers are written with light markdown; the assistant strips it before the
text leaves the engine. None of them mutate the catalog they are given.
"""
from __future__ import annotations

import math
from typing import Sequence

from ..catalog.models import PricingType, ToolRecord
from .intent import (
    extract_features,
    extract_integrations,
    extract_keywords,
    extract_tool_names,
)
from .models import UserRequirements

MAX_RESULTS = 5

GREETING_MESSAGE = """\
Hello! I'm your AI tool selection assistant. I'm here to help you find the perfect AI tools for your needs.

I can help you with:
- Finding tools based on your specific requirements
- Comparing different tools
- Checking budget compatibility
- Understanding features and integrations
- Providing setup guidance

What kind of AI tools are you looking for today?"""

SETUP_MESSAGE = """\
I'd be happy to guide you through the setup process! To provide the most helpful guidance:

1. Which tool are you interested in setting up?
2. What's your technical background (beginner, intermediate, advanced)?
3. What's your primary use case?

Most tools in our catalog offer:
- Easy signup process (usually 5-10 minutes)
- Free trials or free tiers
- Documentation and tutorials
- Community support

Please share more details so I can provide specific setup guidance!"""

GENERAL_MESSAGE = """\
I'm here to help you find the perfect AI tools! I can assist with:

- **Tool Discovery**: Tell me what you're trying to accomplish
- **Comparisons**: Compare different tools side-by-side
- **Budget Planning**: Find tools within your budget
- **Feature Matching**: Match tools to your specific needs
- **Integration Help**: Find tools that work with your existing stack

What would you like to know more about?"""

BUDGET_NO_MATCH = (
    "I couldn't find tools matching your budget criteria. "
    "Would you like to explore other pricing options?"
)
FEATURES_ASK = (
    "I'd be happy to help you find tools with specific features! Could you tell me what "
    "features are most important to you? For example: automation, API access, "
    "collaboration, analytics, etc."
)
FEATURES_NO_MATCH = (
    "I couldn't find tools with those specific features. Could you describe your use case "
    "differently, or would you like suggestions for alternative features?"
)
COMPARISON_NEED_TWO = (
    "To help you compare tools, please mention at least two valid tool names from our "
    'catalog. For example: "Compare ChatGPT and Claude", or tell me your requirements '
    "and I'll suggest tools to compare."
)
RECOMMENDATION_NO_MATCH = (
    "I couldn't find tools matching your exact criteria. Could you provide more details "
    "about what you're looking for? For example, your industry, team size, or specific use cases?"
)
INTEGRATION_ASK = (
    "I can help you find tools with specific integrations! Which platforms or services do "
    "you need to integrate with? For example: Slack, Google Workspace, Salesforce, etc."
)


def _budget_filter(message: str) -> PricingType | None:
    """Pick the pricing type a budget question is about, or ``None`` for all."""
    lower = message.lower()
    if "freemium" in lower or ("free" in lower and "paid" in lower):
        return PricingType.freemium
    if "free" in lower:
        return PricingType.free
    return None


def _mentions_any(tool: ToolRecord, keywords: Sequence[str], fields: Sequence[str]) -> bool:
    haystacks = [getattr(tool, field).lower() for field in fields]
    tags = [tag.lower() for tag in tool.tags]
    return any(
        any(keyword in text for text in haystacks) or any(keyword in tag for tag in tags)
        for keyword in keywords
    )


def recommendation_score(tool: ToolRecord) -> float:
    return tool.rating * 2 + math.log10(tool.views + 1)


def recommendation_reason(tool: ToolRecord, requirements: UserRequirements) -> str:
    reasons: list[str] = []

    if tool.rating >= 4.5:
        reasons.append("highly rated by users")
    if tool.views > 1000:
        reasons.append("popular choice")
    if requirements.budget and tool.pricing_type.value == requirements.budget:
        reasons.append("matches your budget")
    if tool.featured:
        reasons.append("featured tool")

    if not reasons:
        return "fits your requirements"
    return ", ".join(reasons)


def render_comparison(tools: Sequence[ToolRecord]) -> str:
    lines = ["Here's a comparison of the tools you mentioned:", ""]
    for tool in tools:
        lines.append(f"**{tool.name}**")
        lines.append(f"- Pricing: {tool.pricing_type.value}")
        lines.append(f"- Rating: ★ {tool.rating}")
        lines.append(f"- Category: {tool.category.name if tool.category else 'N/A'}")
        lines.append(f"- Description: {tool.description}")
        lines.append("")
    lines.append(
        "Would you like more detailed comparisons on specific aspects like features, "
        "pricing, or use cases?"
    )
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def handle_greeting() -> str:
    return GREETING_MESSAGE


def handle_budget(message: str, tools: Sequence[ToolRecord]) -> str:
    pricing = _budget_filter(message)
    matching = [t for t in tools if pricing is None or t.pricing_type == pricing]

    if not matching:
        return BUDGET_NO_MATCH

    top = sorted(matching, key=lambda t: t.rating, reverse=True)[:MAX_RESULTS]
    label = f"{pricing.value.lower()} tools" if pricing else "tools"

    lines = [f"I found {len(matching)} {label} for you. Here are the top-rated ones:", ""]
    for idx, tool in enumerate(top, start=1):
        lines.append(f"{idx}. {tool.name} - {tool.pricing_type.value} (★ {tool.rating})")
        lines.append(f"   {tool.description}")
        lines.append("")
    lines.append(
        "Would you like more details about any of these tools, or shall I refine the "
        "search based on specific features?"
    )
    return "\n".join(lines)


def handle_features(message: str, tools: Sequence[ToolRecord]) -> str:
    features = extract_features(message)
    if not features:
        return FEATURES_ASK

    matching = [
        t for t in tools
        if _mentions_any(t, features, ("description", "long_description"))
    ]
    if not matching:
        return FEATURES_NO_MATCH

    lines = [f"I found {len(matching)} tools with {', '.join(features)} capabilities:", ""]
    for idx, tool in enumerate(matching[:MAX_RESULTS], start=1):
        lines.append(f"{idx}. {tool.name} ({tool.pricing_type.value})")
        lines.append(f"   {tool.description}")
        lines.append(f"   Rating: ★ {tool.rating}")
        lines.append("")
    lines.append("Would you like detailed information about any of these tools?")
    return "\n".join(lines)


def handle_comparison(message: str, tools: Sequence[ToolRecord]) -> str:
    names = extract_tool_names(message, tools)
    by_name = {t.name.lower(): t for t in reversed(tools)}
    matched = [by_name[n.lower()] for n in names if n.lower() in by_name]

    if len(matched) < 2:
        return COMPARISON_NEED_TWO

    return render_comparison(matched)


def handle_recommendation(
    message: str,
    requirements: UserRequirements,
    tools: Sequence[ToolRecord],
) -> str:
    candidates = list(tools)

    if requirements.budget and requirements.budget != "all":
        candidates = [t for t in candidates if t.pricing_type.value == requirements.budget]

    keywords = extract_keywords(message)
    if keywords:
        candidates = [t for t in candidates if _mentions_any(t, keywords, ("name", "description"))]

    top = sorted(candidates, key=recommendation_score, reverse=True)[:MAX_RESULTS]
    if not top:
        return RECOMMENDATION_NO_MATCH

    lines = ["Based on your requirements, here are my top recommendations:", ""]
    for idx, tool in enumerate(top, start=1):
        lines.append(f"{idx}. **{tool.name}** ({tool.pricing_type.value})")
        lines.append(f"   Rating: ★ {tool.rating} | Views: {tool.views:,}")
        lines.append(f"   {tool.description}")
        lines.append(f"   Why I recommend it: {recommendation_reason(tool, requirements)}")
        lines.append("")
    lines.append(
        "Would you like more information about any of these tools, or shall I adjust "
        "the recommendations?"
    )
    return "\n".join(lines)


def handle_integration(message: str) -> str:
    # Echoes the detected platforms only; tools are not filtered by integration.
    integrations = extract_integrations(message)
    if not integrations:
        return INTEGRATION_ASK

    return (
        f"I'm checking for tools that integrate with {', '.join(integrations)}. Many tools in "
        "our catalog support various integrations. Let me show you some relevant options. "
        "Could you also tell me what you're trying to accomplish with these integrations?"
    )


def handle_setup() -> str:
    return SETUP_MESSAGE


def handle_general() -> str:
    return GENERAL_MESSAGE
