from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# GROQ_* settings may live in a .env at the repo root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


def _flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in {"0", "false", "no", "off"}


@dataclass(frozen=True)
class LLMConfig:
    """Settings for the Groq-written tool comparison."""

    api_key: str = os.getenv("GROQ_API_KEY", "")
    model: str = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")
    timeout: float = 15.0
    max_tokens: int = 1500
    temperature: float = 0.4
    enabled: bool = _flag("LLM_ENABLED", True)


DEFAULT_LLM_CONFIG = LLMConfig()
