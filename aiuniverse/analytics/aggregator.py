from __future__ import annotations

from collections import Counter
from typing import Any

from ..chat.models import Intent
from .store import EventType


def _top(counter: Counter[str], n: int = 5) -> list[dict[str, Any]]:
    return [{"name": name, "count": count} for name, count in counter.most_common(n)]


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    turns = [e for e in events if e["type"] == EventType.chat_turn.value]
    total = len(turns)

    # Average response time
    times = [t["response_time_ms"] for t in turns if "response_time_ms" in t]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Intent distribution, every intent listed even when unused
    intent_counter: Counter[str] = Counter(t.get("intent", Intent.general.value) for t in turns)
    intents = {i.value: intent_counter.get(i.value, 0) for i in Intent}

    failures = sum(1 for t in turns if t.get("failed"))
    fallbacks = intents[Intent.general.value]

    # Requirement values seen on the latest turn of each conversation
    latest: dict[str, dict[str, Any]] = {}
    for t in turns:
        latest[t.get("session_id", "")] = t
    budgets: Counter[str] = Counter()
    industries: Counter[str] = Counter()
    team_sizes: Counter[str] = Counter()
    for t in latest.values():
        if t.get("budget"):
            budgets[t["budget"]] += 1
        if t.get("industry"):
            industries[t["industry"]] += 1
        if t.get("team_size"):
            team_sizes[t["team_size"]] += 1

    favorites = [e for e in events if e["type"] == EventType.favorite.value]
    blocked = sum(1 for f in favorites if f.get("limited"))

    comparisons = [e for e in events if e["type"] == EventType.compare.value]
    llm_used = sum(1 for c in comparisons if c.get("llm"))

    return {
        "total_chat_turns": total,
        "conversations": len(latest),
        "avg_response_time_ms": avg_time,
        "intents": intents,
        "failure_rate": round(failures / total * 100, 1) if total else 0.0,
        "general_fallback_rate": round(fallbacks / total * 100, 1) if total else 0.0,
        "requirements": {
            "budget": _top(budgets),
            "industry": _top(industries),
            "team_size": _top(team_sizes),
        },
        "favorites": {
            "attempts": len(favorites),
            "blocked_by_limit": blocked,
        },
        "comparisons": {
            "total": len(comparisons),
            "llm_generated": llm_used,
        },
    }
