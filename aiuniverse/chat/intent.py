from __future__ import annotations

import re
from typing import Sequence

from ..catalog.models import ToolRecord
from .models import ChatMessage, Intent, UserRequirements

# ---------------------------------------------------------------------------
# Intent rules
# ---------------------------------------------------------------------------
# Evaluated top to bottom, first match wins. A message mentioning both
# "budget" and "compare" is a budget question.

_GREETING_RE = re.compile(r"^(hi|hello|hey|greetings)")

INTENT_RULES: list[tuple[Intent, tuple[str, ...]]] = [
    (Intent.budget, ("budget", "cost", "price", "afford")),
    (Intent.features, ("feature", "can it", "does it")),
    (Intent.comparison, ("compare", "difference", "vs", "better")),
    (Intent.recommendation, ("recommend", "suggest", "best", "looking for")),
    (Intent.integration, ("integrate", "work with", "connect")),
    (Intent.setup, ("setup", "install", "get started")),
]

FEATURE_KEYWORDS = [
    "api", "automation", "analytics", "collaboration", "integration",
    "real-time", "cloud", "mobile", "dashboard", "reporting",
    "ai", "ml", "nlp", "vision", "speech",
]

INTEGRATION_KEYWORDS = [
    "slack", "teams", "google", "microsoft", "salesforce", "hubspot",
    "zapier", "api", "webhook", "aws", "azure", "gcp",
]

STOP_WORDS = {"i", "need", "want", "looking", "for", "the", "a", "an", "to", "and", "or"}

INDUSTRIES = ["healthcare", "finance", "education", "marketing", "technology"]


def classify_intent(message: str) -> Intent:
    lower = message.lower()

    if _GREETING_RE.match(lower):
        return Intent.greeting

    for intent, keywords in INTENT_RULES:
        if any(keyword in lower for keyword in keywords):
            return intent

    return Intent.general


def latest_user_message(history: Sequence[ChatMessage]) -> str:
    for message in reversed(history):
        if message.role == "user":
            return message.content
    return ""


# ---------------------------------------------------------------------------
# Extraction helpers
# ---------------------------------------------------------------------------


def extract_features(message: str) -> list[str]:
    lower = message.lower()
    return [keyword for keyword in FEATURE_KEYWORDS if keyword in lower]


def extract_integrations(message: str) -> list[str]:
    lower = message.lower()
    return [keyword for keyword in INTEGRATION_KEYWORDS if keyword in lower]


def extract_keywords(message: str) -> list[str]:
    words = message.lower().split()
    return [word for word in words if len(word) > 3 and word not in STOP_WORDS]


def extract_tool_names(message: str, tools: Sequence[ToolRecord]) -> list[str]:
    """Return catalog names that appear in the message, without duplicates."""
    lower = message.lower()
    names: list[str] = []
    seen: set[str] = set()
    for tool in tools:
        key = tool.name.lower()
        if key and key in lower and key not in seen:
            seen.add(key)
            names.append(tool.name)
    return names


# ---------------------------------------------------------------------------
# Requirements
# ---------------------------------------------------------------------------


def derive_requirements(history: Sequence[ChatMessage]) -> UserRequirements:
    """Rebuild requirements from the whole transcript. Later mentions win."""
    requirements = UserRequirements()

    for message in history:
        content = message.content.lower()

        if "free" in content:
            requirements.budget = "Free"
        elif "paid" in content:
            requirements.budget = "Paid"

        if "small team" in content:
            requirements.team_size = "small"
        elif "enterprise" in content:
            requirements.team_size = "enterprise"

        for industry in INDUSTRIES:
            if industry in content:
                requirements.industry = industry

    return requirements
