from __future__ import annotations

import time
from enum import Enum
from typing import Any


class EventType(str, Enum):
    chat_turn = "chat_turn"
    favorite = "favorite"
    compare = "compare"


# In-memory event log, newest last
_events: list[dict[str, Any]] = []


def record_event(event_type: EventType, data: dict[str, Any]) -> None:
    """Append one event. ``data`` keys are flattened next to ``type``/``timestamp``."""
    _events.append({
        **data,
        "type": EventType(event_type).value,
        "timestamp": time.time(),
    })


def get_events(event_type: EventType | None = None) -> list[dict[str, Any]]:
    if event_type is None:
        return list(_events)
    wanted = EventType(event_type).value
    return [e for e in _events if e["type"] == wanted]


def clear_events() -> None:
    _events.clear()
