from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

_DEFAULT_CSV = Path(__file__).resolve().parent.parent / "data" / "processed" / "tools.csv"


@dataclass(frozen=True)
class CatalogConfig:
    """
    Configuration for the tool catalog and its importer.
    """

    processed_path: Path = Path(os.getenv("CATALOG_CSV", str(_DEFAULT_CSV)))
    # Tools handed to the chat assistant per turn
    fetch_limit: int = 100
    cache_ttl: float = 300.0
    published_status: str = "Published"
    tag_separator: str = "|"


DEFAULT_CATALOG_CONFIG = CatalogConfig()
