"""AI-assisted search suggestions: query → relevant categories + keywords.

``SearchSuggester.suggest`` asks the chat-completion model which catalog
categories a free-text query is about.  Without an API key, or when the
model call fails in any way, it falls back to :func:`basic_suggestion`, a
keyword-map heuristic.  Model answers are memoised in a
:class:`SuggestionCache` owned by the suggester (size-bounded, with TTL).
"""

from __future__ import annotations

import json
import time
from collections import OrderedDict
from typing import Callable, Sequence

import httpx
from loguru import logger

from toolshelf.catalog.models import SearchSuggestion, ToolCategory
from toolshelf.config import settings
from toolshelf.errors import StructuredDataError
from toolshelf.scraper.structured import chat_completion

_MAX_CATEGORIES = 3
_MAX_KEYWORDS = 5

_KEYWORD_CATEGORY_MAP: dict[str, tuple[str, ...]] = {
    "image": ("Image Gen", "Design"),
    "photo": ("Image Gen", "Design"),
    "picture": ("Image Gen", "Design"),
    "art": ("Image Gen", "Design"),
    "design": ("Design", "Image Gen"),
    "write": ("Text Gen", "Marketing"),
    "text": ("Text Gen", "Marketing"),
    "content": ("Text Gen", "Marketing"),
    "code": ("Code Assistant", "Productivity"),
    "programming": ("Code Assistant", "Productivity"),
    "chat": ("Chatbot",),
    "talk": ("Chatbot",),
    "conversation": ("Chatbot",),
    "video": ("Video AI", "Video Creation"),
    "music": ("Audio AI",),
    "audio": ("Audio AI",),
    "data": ("Analytics", "Research"),
    "analysis": ("Analytics", "Research"),
    "business": ("Business", "Productivity"),
    "productivity": ("Productivity",),
    "marketing": ("Marketing", "Text Gen"),
    "copy": ("Marketing", "Text Gen"),
    "copywriting": ("Marketing", "Text Gen"),
    "advertising": ("Marketing",),
    "ads": ("Marketing",),
    "campaign": ("Marketing",),
    "social": ("Marketing",),
    "email": ("Marketing", "Text Gen"),
    "seo": ("Marketing",),
    "blog": ("Marketing", "Text Gen"),
    "automation": ("Automation",),
    "nocode": ("No-Code",),
    "education": ("Education",),
    "research": ("Research",),
    "coding": ("Coding",),
}

_PROMPT_TEMPLATE = """\
You are an AI assistant helping users find tools in an AI tool catalog. Analyze this search query and suggest relevant categories and keywords.

User query: "{query}"

Available categories: {categories}

Provide a JSON response with:
1. "categories": An array of 1-3 most relevant category names from the available categories (exact matches only)
2. "keywords": An array of 3-5 relevant search keywords/terms to help find tools

Rules:
- Categories must be exact matches from the available list
- Keywords should be specific and related to the user's intent
- Focus on functionality, use cases, and tool types
- Return only valid JSON

Example:
{{"categories": ["Image Generation", "Design"], "keywords": ["create", "images", "ai art", "graphics", "visual"]}}"""


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------

class SuggestionCache:
    """LRU cache with a per-entry TTL.  Owned by whoever creates it."""

    def __init__(
        self,
        max_size: int | None = None,
        ttl: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_size = settings.suggestion_cache_size if max_size is None else max_size
        self.ttl = settings.suggestion_cache_ttl if ttl is None else ttl
        self._clock = clock
        self._data: OrderedDict[str, tuple[float, SearchSuggestion]] = OrderedDict()

    def get(self, key: str) -> SearchSuggestion | None:
        item = self._data.get(key)
        if item is None:
            return None
        stored_at, value = item
        if self._clock() - stored_at > self.ttl:
            del self._data[key]
            return None
        self._data.move_to_end(key)
        return value

    def set(self, key: str, value: SearchSuggestion) -> None:
        if self.max_size <= 0:
            return
        self._data[key] = (self._clock(), value)
        self._data.move_to_end(key)
        while len(self._data) > self.max_size:
            self._data.popitem(last=False)

    def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)


# ---------------------------------------------------------------------------
# Keyword fallback
# ---------------------------------------------------------------------------

def basic_suggestion(query: str, categories: Sequence[ToolCategory]) -> SearchSuggestion:
    """Heuristic suggestion used when the model is unavailable."""
    lower_query = query.lower()
    keywords = lower_query.split()
    names = {c.name for c in categories}

    matched: list[str] = []
    for category in categories:
        category_name = category.name.lower()
        if category_name in lower_query or any(
            word in lower_query for word in category_name.split()
        ):
            matched.append(category.name)

    for keyword in keywords:
        for mapped in _KEYWORD_CATEGORY_MAP.get(keyword, ()):
            if mapped in names and mapped not in matched:
                matched.append(mapped)

    return SearchSuggestion(
        categories=tuple(matched[:_MAX_CATEGORIES]),
        keywords=tuple(keywords[:_MAX_KEYWORDS]),
    )


# ---------------------------------------------------------------------------
# Suggester
# ---------------------------------------------------------------------------

class SearchSuggester:
    """Maps free-text queries to catalog categories and keywords."""

    def __init__(
        self,
        cache: SuggestionCache | None = None,
        api_key: str | None = None,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.cache = cache if cache is not None else SuggestionCache()
        self.api_key = settings.openai_api_key if api_key is None else api_key
        self.base_url = base_url or settings.llm_base_url
        self._client = client

    async def suggest(
        self,
        query: str,
        categories: Sequence[ToolCategory],
    ) -> SearchSuggestion | None:
        """Return a suggestion for *query*, or ``None`` for a blank query."""
        if not query.strip():
            return None

        key = query.lower().strip()
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        if not self.api_key:
            logger.warning("OpenAI API key not found; returning basic search suggestion.")
            return basic_suggestion(query, categories)

        names = [c.name for c in categories]
        prompt = _PROMPT_TEMPLATE.format(query=query, categories=", ".join(names))
        try:
            reply = await chat_completion(
                prompt,
                max_tokens=200,
                api_key=self.api_key,
                base_url=self.base_url,
                client=self._client,
            )
        except StructuredDataError as exc:
            logger.warning(f"[suggest] model call failed, using keyword fallback: {exc}")
            return basic_suggestion(query, categories)
        if not reply:
            logger.warning("[suggest] empty model reply, using keyword fallback")
            return basic_suggestion(query, categories)

        try:
            data = json.loads(reply)
        except json.JSONDecodeError:
            data = None

        if not isinstance(data, dict):
            logger.warning("[suggest] model returned no usable JSON, using keyword fallback")
            suggestion = basic_suggestion(query, categories)
        else:
            suggestion = self._from_reply(data, query, names)

        self.cache.set(key, suggestion)
        return suggestion

    @staticmethod
    def _from_reply(data: dict, query: str, names: list[str]) -> SearchSuggestion:
        raw_categories = data.get("categories")
        raw_keywords = data.get("keywords")

        categories = (
            [c for c in raw_categories if isinstance(c, str) and c in names]
            if isinstance(raw_categories, list)
            else []
        )
        if isinstance(raw_keywords, list):
            keywords = [str(k) for k in raw_keywords if str(k).strip()]
        else:
            keywords = query.lower().split()

        return SearchSuggestion(
            categories=tuple(categories[:_MAX_CATEGORIES]),
            keywords=tuple(keywords[:_MAX_KEYWORDS]),
        )
