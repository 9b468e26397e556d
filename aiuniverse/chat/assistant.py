from __future__ import annotations

import logging
import re
from typing import Callable, Sequence

from ..catalog.config import DEFAULT_CATALOG_CONFIG
from ..catalog.data_store import fetch_published_tools
from ..catalog.models import ToolRecord
from . import handlers
from .intent import classify_intent, latest_user_message
from .models import ChatMessage, Intent, TurnResult, UserRequirements

logger = logging.getLogger(__name__)

ERROR_MESSAGE = "I apologize, but I encountered an error. Please try rephrasing your question."

CatalogReader = Callable[[int], Sequence[ToolRecord]]

_LIST_MARKER_RE = re.compile(r"^([ \t]*)[*-][ \t]", re.MULTILINE)
_HEADING_RE = re.compile(r"^#{1,6}[ \t]+", re.MULTILINE)
_LINK_RE = re.compile(r"\[([^\]]+)\]\([^)]+\)")
_INLINE_CODE_RE = re.compile(r"`([^`]+)`")


def clean_markdown(text: str) -> str:
    """Reduce handler markdown to plain text with bullet glyphs."""
    text = text.replace("**", "")
    text = _LIST_MARKER_RE.sub(r"\1• ", text)
    text = _HEADING_RE.sub("", text)
    text = _LINK_RE.sub(r"\1", text)
    text = _INLINE_CODE_RE.sub(r"\1", text)
    return text


def _dispatch(
    intent: Intent,
    message: str,
    requirements: UserRequirements,
    tools: Sequence[ToolRecord],
) -> str:
    if intent is Intent.greeting:
        return handlers.handle_greeting()
    if intent is Intent.budget:
        return handlers.handle_budget(message, tools)
    if intent is Intent.features:
        return handlers.handle_features(message, tools)
    if intent is Intent.comparison:
        return handlers.handle_comparison(message, tools)
    if intent is Intent.recommendation:
        return handlers.handle_recommendation(message, requirements, tools)
    if intent is Intent.integration:
        return handlers.handle_integration(message)
    if intent is Intent.setup:
        return handlers.handle_setup()
    return handlers.handle_general()


def run_turn(
    history: Sequence[ChatMessage],
    requirements: UserRequirements,
    fetch_tools: CatalogReader = fetch_published_tools,
    limit: int = DEFAULT_CATALOG_CONFIG.fetch_limit,
) -> TurnResult:
    """Answer the latest user message in ``history``.

    The catalog is read once per turn. Any failure is logged and replaced by
    a fixed apology so the caller always gets a complete reply.
    """
    message = latest_user_message(history)
    intent = classify_intent(message)

    try:
        tools = list(fetch_tools(limit))
        reply = _dispatch(intent, message, requirements, tools)
    except Exception:
        logger.warning("Assistant turn failed for intent %s", intent.value, exc_info=True)
        return TurnResult(intent=intent, message=ERROR_MESSAGE, failed=True)

    return TurnResult(intent=intent, message=clean_markdown(reply))


def classify_and_respond(
    history: Sequence[ChatMessage],
    requirements: UserRequirements,
    fetch_tools: CatalogReader = fetch_published_tools,
) -> str:
    return run_turn(history, requirements, fetch_tools).message
