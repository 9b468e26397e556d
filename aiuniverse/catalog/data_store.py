from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pandas as pd
from pydantic import ValidationError

from .config import DEFAULT_CATALOG_CONFIG, CatalogConfig
from .models import Category, ToolRecord

logger = logging.getLogger(__name__)

CANONICAL_COLUMNS: list[str] = [
    "id",
    "name",
    "description",
    "long_description",
    "pricing_type",
    "rating",
    "views",
    "tags",
    "category",
    "featured",
    "status",
]

_TEXT_COLUMNS = ["id", "name", "description", "long_description", "pricing_type", "tags", "category", "status"]
_TRUE_VALUES = {"true", "1", "yes", "y", "t"}

_frames: dict[Path, pd.DataFrame] = {}


def _is_missing(value: Any) -> bool:
    # pd.isna on a list or dict returns an array, so only test scalars
    return value is None or (pd.api.types.is_scalar(value) and pd.isna(value))


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if _is_missing(value) or not pd.api.types.is_scalar(value):
        return False
    return str(value).strip().lower() in _TRUE_VALUES


def _load(config: CatalogConfig) -> pd.DataFrame:
    df = pd.read_csv(config.processed_path, dtype={"id": str, "tags": str})

    for col in CANONICAL_COLUMNS:
        if col not in df.columns:
            df[col] = pd.NA

    # Admin-entered rows are often incomplete; default everything at load time
    for col in _TEXT_COLUMNS:
        df[col] = df[col].fillna("").astype(str).str.strip()

    df["rating"] = pd.to_numeric(df["rating"], errors="coerce").fillna(0.0).clip(0.0, 5.0)
    df["views"] = pd.to_numeric(df["views"], errors="coerce").fillna(0).clip(lower=0).astype(int)
    df["featured"] = df["featured"].apply(_to_bool)
    df["tags_list"] = df["tags"].apply(
        lambda s: [t.strip() for t in s.split(config.tag_separator) if t.strip()]
    )

    return df


def get_dataframe(config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> pd.DataFrame:
    """Return the in-memory catalog DataFrame, loading it on first call."""
    path = config.processed_path
    if path not in _frames:
        _frames[path] = _load(config)
    return _frames[path]


def reset_data_store() -> None:
    _frames.clear()


def _row_to_record(row: pd.Series) -> ToolRecord | None:
    if not row["id"] or not row["name"]:
        logger.warning("Skipping catalog row without id or name: %r", row.get("name"))
        return None
    try:
        return ToolRecord(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            long_description=row["long_description"],
            pricing_type=row["pricing_type"],
            rating=float(row["rating"]),
            views=int(row["views"]),
            tags=list(row["tags_list"]),
            category=Category(name=row["category"]) if row["category"] else None,
            featured=bool(row["featured"]),
        )
    except ValidationError:
        logger.warning("Skipping malformed catalog row %s", row["id"], exc_info=True)
        return None


def _published(config: CatalogConfig) -> pd.DataFrame:
    df = get_dataframe(config)
    return df.loc[df["status"] == config.published_status]


def fetch_published_tools(
    limit: int | None = None,
    config: CatalogConfig = DEFAULT_CATALOG_CONFIG,
) -> list[ToolRecord]:
    """Return published tools in catalog order, the first ``limit`` of them when given."""
    published = _published(config)
    if limit is not None:
        published = published.head(limit)

    records: list[ToolRecord] = []
    for _, row in published.iterrows():
        record = _row_to_record(row)
        if record is not None:
            records.append(record)
    return records


def fetch_categories(config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> list[Category]:
    """Distinct category names of published tools."""
    names = sorted({name for name in _published(config)["category"] if name})
    return [Category(name=name) for name in names]
