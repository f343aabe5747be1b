"""
Environment-driven settings for the LLM gateway.

Rationale:
- Read the environment once (after main.py has loaded .env) and keep the result immutable.
- A missing API key is a valid configuration: every request then goes through the fallback path.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


DEFAULT_API_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-4o-mini"


def _env_float(name: str, default: float) -> float:
    raw = str(os.getenv(name, "")).strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    api_url: str = DEFAULT_API_URL
    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    temperature: float = 0.7
    timeout: float = 30.0

    @property
    def configured(self) -> bool:
        return bool(self.api_key)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build settings from environment variables (cached for the process lifetime)."""
    return Settings(
        api_url=os.getenv("OPENAI_API_URL") or DEFAULT_API_URL,
        api_key=(os.getenv("OPENAI_API_KEY") or "").strip() or None,
        model=os.getenv("OPENAI_MODEL") or DEFAULT_MODEL,
        temperature=_env_float("LLM_TEMPERATURE", 0.7),
        timeout=_env_float("LLM_TIMEOUT_SECONDS", 30.0),
    )
