"""Centralised settings for the toolshelf backend.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).

API keys are optional: a missing ``SCRAPINGBEE_API_KEY`` makes the rendering
strategy fail fast so the pipeline moves on to the next one, and a missing
``OPENAI_API_KEY`` disables model calls (extraction raises
``ModelUnavailable``, suggestions fall back to keyword matching).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Text-generation model (OpenAI-compatible chat completions)
    # ------------------------------------------------------------------
    openai_api_key: str = field(
        default_factory=lambda: os.environ.get("OPENAI_API_KEY", "")
    )
    llm_base_url: str = field(
        default_factory=lambda: os.environ.get("LLM_BASE_URL", "https://api.openai.com/v1")
    )
    llm_model: str = field(
        default_factory=lambda: os.environ.get("LLM_MODEL", "gpt-3.5-turbo")
    )
    llm_temperature: float = field(
        default_factory=lambda: float(os.environ.get("LLM_TEMPERATURE", "0.3"))
    )
    llm_max_tokens: int = field(
        default_factory=lambda: int(os.environ.get("LLM_MAX_TOKENS", "1000"))
    )

    # ------------------------------------------------------------------
    # Fetch strategies
    # ------------------------------------------------------------------
    scrapingbee_api_key: str = field(
        default_factory=lambda: os.environ.get("SCRAPINGBEE_API_KEY", "")
    )
    render_api_url: str = field(
        default_factory=lambda: os.environ.get(
            "RENDER_API_URL", "https://app.scrapingbee.com/api/v1/"
        )
    )
    # "proxy" (hosted rendering API) or "playwright" (local headless Chromium)
    render_backend: str = field(
        default_factory=lambda: os.environ.get("RENDER_BACKEND", "proxy")
    )
    render_nav_timeout: float = field(
        default_factory=lambda: float(os.environ.get("RENDER_NAV_TIMEOUT", "30.0"))
    )
    render_settle_delay: float = field(
        default_factory=lambda: float(os.environ.get("RENDER_SETTLE_DELAY", "3.0"))
    )
    readability_api_url: str = field(
        default_factory=lambda: os.environ.get(
            "READABILITY_API_URL", "https://readability-api.eu.org/api"
        )
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )

    # ------------------------------------------------------------------
    # Normalisation
    # ------------------------------------------------------------------
    excerpt_max_chars: int = field(
        default_factory=lambda: int(os.environ.get("EXCERPT_MAX_CHARS", "4000"))
    )
    min_content_chars: int = field(
        default_factory=lambda: int(os.environ.get("MIN_CONTENT_CHARS", "100"))
    )
    spa_max_chars: int = field(
        default_factory=lambda: int(os.environ.get("SPA_MAX_CHARS", "5000"))
    )

    # ------------------------------------------------------------------
    # Catalog search
    # ------------------------------------------------------------------
    search_debounce: float = field(
        default_factory=lambda: float(os.environ.get("SEARCH_DEBOUNCE", "0.3"))
    )
    suggestion_cache_size: int = field(
        default_factory=lambda: int(os.environ.get("SUGGESTION_CACHE_SIZE", "256"))
    )
    suggestion_cache_ttl: float = field(
        default_factory=lambda: float(os.environ.get("SUGGESTION_CACHE_TTL", "3600"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO")
    )


# Module-level singleton; import this everywhere:
#   from toolshelf.config import settings
settings = Settings()
