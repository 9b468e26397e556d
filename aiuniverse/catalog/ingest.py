"""
Import a raw ``ai_tools`` export into the canonical catalog CSV.

Usage:
    python -m aiuniverse.catalog.ingest path/to/ai_tools.json
"""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, List

import pandas as pd

from .config import DEFAULT_CATALOG_CONFIG, CatalogConfig
from .data_store import CANONICAL_COLUMNS, _is_missing, _to_bool
from .models import PricingType

_PRICING_LOOKUP = {p.value.lower(): p.value for p in PricingType}


def _normalize_pricing(value: Any) -> str | None:
    if _is_missing(value) or not pd.api.types.is_scalar(value):
        return None
    return _PRICING_LOOKUP.get(str(value).strip().lower())


def _normalize_rating(rating: float | int | str | None) -> float:
    if rating is None:
        return 0.0
    raw = str(rating).strip()
    # Handle "X/5" format (e.g. "4.1/5")
    if "/" in raw:
        raw = raw.split("/")[0].strip()
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0.0
    if value != value:  # NaN
        return 0.0

    # Clamp to [0, 5]
    return max(0.0, min(5.0, value))


def _normalize_tags(tags: Any, separator: str) -> str:
    if isinstance(tags, str):
        items = tags.replace(separator, ",").split(",")
    elif isinstance(tags, (list, tuple)):
        items = [str(t) for t in tags]
    else:
        items = []
    return separator.join(t.strip() for t in items if t and t.strip())


def _category_name(value: Any) -> str:
    if isinstance(value, dict):
        return str(value.get("name") or "")
    if _is_missing(value) or not pd.api.types.is_scalar(value):
        return ""
    return str(value)


def _read_rows(source: Path) -> list[dict[str, Any]]:
    payload = json.loads(source.read_text(encoding="utf-8"))
    # Accept both a bare list and a ``{"data": [...]}`` response body
    if isinstance(payload, dict):
        payload = payload.get("data") or []
    return [row for row in payload if isinstance(row, dict)]


def run_ingestion(source: Path, config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> Path:
    """
    Normalise a JSON export of the hosted tool table.

    Steps:
    - Map loosely named raw fields into the canonical tool schema.
    - Default missing text fields, clamp ratings and views, flatten tags
      and the joined category.
    - Drop rows without a recognised pricing type, then write the CSV.
    """
    df = pd.DataFrame(_read_rows(source))

    def _column(columns: List[str], default: Any) -> pd.Series:
        # Exports mix column names row by row; coalesce all known aliases
        present = [col for col in columns if col in df.columns]
        if not present:
            return pd.Series([default] * len(df), index=df.index, dtype=object)
        series = df[present[0]]
        for col in present[1:]:
            series = series.combine_first(df[col])
        return series

    canonical = pd.DataFrame(index=df.index)
    canonical["id"] = _column(["id", "tool_id", "uuid"], "").fillna("").astype(str)
    canonical["name"] = _column(["name", "tool_name", "title"], "").fillna("").astype(str)
    canonical["description"] = _column(["description", "short_description"], "").fillna("").astype(str)
    canonical["long_description"] = _column(["long_description", "details"], "").fillna("").astype(str)
    canonical["pricing_type"] = _column(["pricing_type", "pricing", "price_type"], None).apply(_normalize_pricing)
    canonical["rating"] = _column(["rating", "avg_rating"], None).apply(_normalize_rating)
    canonical["views"] = (
        pd.to_numeric(_column(["views", "view_count"], 0), errors="coerce").fillna(0).clip(lower=0).astype(int)
    )
    canonical["tags"] = _column(["tags", "keywords"], None).apply(
        lambda t: _normalize_tags(t, config.tag_separator)
    )
    canonical["category"] = _column(["category", "category_name"], None).apply(_category_name)
    canonical["featured"] = _column(["featured", "is_featured"], False).apply(_to_bool)
    canonical["status"] = _column(["status"], config.published_status).fillna("").astype(str)

    canonical = canonical.loc[canonical["pricing_type"].notna() & (canonical["name"] != "")]
    canonical = canonical[CANONICAL_COLUMNS]

    config.processed_path.parent.mkdir(parents=True, exist_ok=True)
    output_path = config.processed_path
    canonical.to_csv(output_path, index=False)
    return output_path


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python -m aiuniverse.catalog.ingest <export.json>")
        sys.exit(1)
    path = run_ingestion(Path(sys.argv[1]))
    print(f"Ingestion complete. Catalog saved to: {path}")
