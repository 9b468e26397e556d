from __future__ import annotations

import json
import logging
from typing import Sequence

from groq import Groq

from ..catalog.models import ToolRecord
from .config import DEFAULT_LLM_CONFIG, LLMConfig

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are an experienced AI tools analyst. Compare the tools provided by the user \
objectively, using only the data given.

Structure the answer as:
Summary: two or three sentences on the key differences.
Strengths and weaknesses: for each tool, its top strengths and weaknesses.
Pricing and value: how the pricing models compare.
Best for: one line per tool naming the user it suits best.
Recommendation: which tool to pick for beginners, professionals and teams.

Write plain text without markdown tables. Keep it under 350 words."""


def _build_user_message(tools: Sequence[ToolRecord], question: str | None) -> str:
    payload = [
        {
            "name": t.name,
            "description": t.description,
            "details": t.long_description,
            "pricing": t.pricing_type.value,
            "rating": t.rating,
            "views": t.views,
            "tags": t.tags,
            "category": t.category.name if t.category else None,
        }
        for t in tools
    ]
    lines = ["## Tools to compare", json.dumps(payload, indent=2)]
    if question:
        lines.append("\n## User question")
        lines.append(f"Answer this specifically after the comparison: {question}")
    return "\n".join(lines)


def compare_tools(
    tools: Sequence[ToolRecord],
    question: str | None = None,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> str | None:
    """
    Ask the Groq LLM for a written comparison of ``tools``.

    Returns the analysis text, or ``None`` when the LLM is disabled,
    unconfigured, or the call fails (timeout, API error, empty output).
    """
    if not config.enabled or not config.api_key:
        return None

    if len(tools) < 2:
        return None

    try:
        client = Groq(api_key=config.api_key, timeout=config.timeout)
        response = client.chat.completions.create(
            model=config.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": _build_user_message(tools, question)},
            ],
            max_tokens=config.max_tokens,
            temperature=config.temperature,
        )

        analysis = (response.choices[0].message.content or "").strip()
        return analysis or None

    except Exception:
        logger.warning("Groq comparison failed, falling back to rule-based summary", exc_info=True)
        return None
