from __future__ import annotations

import time
from pathlib import Path
from typing import Any

from .config import DEFAULT_CATALOG_CONFIG, CatalogConfig
from .data_store import fetch_published_tools
from .models import ToolRecord

# (catalog path, limit) -> {"tools": [...], "created_at": ...}; limit None is the full set
_cache: dict[tuple[Path, int | None], dict[str, Any]] = {}
_hits: int = 0
_misses: int = 0


def cached_fetch_published_tools(
    limit: int | None = None,
    config: CatalogConfig = DEFAULT_CATALOG_CONFIG,
) -> list[ToolRecord]:
    """Published tools through a TTL cache, all of them unless ``limit`` is given.

    Each call returns a fresh list. A failed read leaves the cache untouched.
    """
    global _hits, _misses
    key = (config.processed_path, limit)

    entry = _cache.get(key)
    if entry is not None and time.time() - entry["created_at"] < config.cache_ttl:
        _hits += 1
        return list(entry["tools"])

    _misses += 1
    _cache.pop(key, None)
    tools = fetch_published_tools(limit=limit, config=config)
    _cache[key] = {"tools": tools, "created_at": time.time()}
    return list(tools)


def get_cache_stats() -> dict:
    total = _hits + _misses
    return {
        "size": len(_cache),
        "hits": _hits,
        "misses": _misses,
        "hit_rate": round(_hits / total * 100, 1) if total > 0 else 0.0,
    }


def clear_cache() -> None:
    global _hits, _misses
    _cache.clear()
    _hits = 0
    _misses = 0
