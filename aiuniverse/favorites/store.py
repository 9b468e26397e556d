from __future__ import annotations

import threading
import time
from typing import Any

from ..entitlements.models import SubscriptionTier
from ..entitlements.policy import check_favorite_limit
from .models import FavoriteResult

_favorites: dict[str, list[dict[str, Any]]] = {}
# Serialises the limit check, duplicate check and write for every user
_lock = threading.Lock()


def count_favorites(user_id: str) -> int:
    return len(_favorites.get(user_id, []))


def is_favorite(user_id: str, tool_id: str) -> bool:
    return any(f["tool_id"] == tool_id for f in _favorites.get(user_id, []))


def add_favorite(user_id: str, tool_id: str, tier: SubscriptionTier) -> FavoriteResult:
    with _lock:
        limit = check_favorite_limit(tier, count_favorites(user_id))
        if not limit.allowed:
            return FavoriteResult(success=False, error=limit.message, limited=True)

        if is_favorite(user_id, tool_id):
            return FavoriteResult(success=False, error="Tool already in favorites")

        _favorites.setdefault(user_id, []).append({
            "tool_id": tool_id,
            "created_at": time.time(),
        })
    return FavoriteResult(success=True)


def remove_favorite(user_id: str, tool_id: str) -> FavoriteResult:
    with _lock:
        entries = _favorites.get(user_id, [])
        remaining = [f for f in entries if f["tool_id"] != tool_id]
        if len(remaining) == len(entries):
            return FavoriteResult(success=False, error="Tool is not in favorites")
        _favorites[user_id] = remaining
    return FavoriteResult(success=True)


def get_user_favorites(user_id: str) -> list[dict[str, Any]]:
    """Favorites for ``user_id``, newest first."""
    with _lock:
        return list(reversed(_favorites.get(user_id, [])))


def clear_favorites() -> None:
    with _lock:
        _favorites.clear()
