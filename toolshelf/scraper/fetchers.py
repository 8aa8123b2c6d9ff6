"""Fetch strategies: three independent ways of getting a page's content.

Strategy priority (highest to lowest):
  1. Rendering proxy: hosted browser-rendering API (JS executed); requires
     ``SCRAPINGBEE_API_KEY``.  With ``RENDER_BACKEND=playwright`` the page is
     rendered locally with headless Chromium instead.
  2. Readability proxy: hosted content-extraction API returning readable
     text, title and excerpt.
  3. Direct fetch: plain GET with a browser User-Agent; rejects unrendered
     SPA shells up front.

All strategies share one interface: ``fetch(url) -> FetchedContent``, raising
a :class:`~toolshelf.errors.FetchError` subclass on failure.
``fetch_content`` wraps that into a :class:`FetchOutcome` so the orchestrator
never has to catch expected per-strategy failures.  No strategy retries.
"""

from __future__ import annotations

import asyncio
import json
import re
from abc import ABC, abstractmethod

import httpx
from loguru import logger

from toolshelf.config import settings
from toolshelf.errors import (
    AuthError,
    EmptyContent,
    FetchError,
    HttpError,
    LikelySPA,
    NoContentExtracted,
    UpstreamError,
)
from toolshelf.scraper.models import FetchedContent, FetchOutcome, RawPageContent
from toolshelf.scraper.normalizer import collapse_whitespace, truncate_excerpt

BROWSER_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/122.0.0.0 Safari/537.36"
)

_BROWSER_HEADERS = {
    "User-Agent": BROWSER_UA,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Cache-Control": "max-age=0",
}

# ---------------------------------------------------------------------------
# SPA / JS-rendered page detection heuristics
# ---------------------------------------------------------------------------
_SPA_PATTERNS = [
    re.compile(r"window\.__INITIAL_STATE__"),
    re.compile(r"window\.__APOLLO_STATE__"),
    re.compile(r'id=["\'](?:root|app)["\']', re.IGNORECASE),
    re.compile(r"ng-app", re.IGNORECASE),
    re.compile(r"<script[^>]*src[^>]*app[^>]*\.js", re.IGNORECASE),
    re.compile(r"<script[^>]*src[^>]*bundle[^>]*\.js", re.IGNORECASE),
]


def is_likely_spa(html: str, max_chars: int | None = None) -> bool:
    """Return ``True`` if *html* is a short page carrying an SPA mount marker."""
    max_chars = settings.spa_max_chars if max_chars is None else max_chars
    if len(html.strip()) >= max_chars:
        return False
    return any(pattern.search(html) for pattern in _SPA_PATTERNS)


# ---------------------------------------------------------------------------
# Abstract base
# ---------------------------------------------------------------------------

class FetchStrategy(ABC):
    """Abstract base class for a single fetch strategy."""

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable strategy name."""

    @abstractmethod
    async def fetch(self, url: str) -> FetchedContent:
        """Return the page content or raise a :class:`FetchError` subclass."""

    async def fetch_content(self, url: str) -> FetchOutcome:
        """Run :meth:`fetch` and fold expected failures into a :class:`FetchOutcome`."""
        try:
            content = await self.fetch(url)
        except FetchError as exc:
            return FetchOutcome(strategy=self.name, error=exc)
        except httpx.HTTPError as exc:
            error = UpstreamError(f"{self.name} request failed: {exc!r}")
            error.__cause__ = exc
            return FetchOutcome(strategy=self.name, error=error)
        return FetchOutcome(strategy=self.name, content=content)

    async def _get(self, url: str, **kwargs) -> httpx.Response:
        """GET through the injected client, or a short-lived one."""
        if self._client is not None:
            return await self._client.get(url, **kwargs)
        async with httpx.AsyncClient(
            timeout=settings.request_timeout,
            follow_redirects=True,
        ) as client:
            return await client.get(url, **kwargs)


# ---------------------------------------------------------------------------
# 1. Rendering proxy (hosted API or local Playwright)
# ---------------------------------------------------------------------------

class PlaywrightRenderer:
    """Render a URL with local headless Chromium and return its HTML.

    Playwright is imported lazily so nothing needs a browser install unless
    ``RENDER_BACKEND=playwright`` is actually used.
    """

    def __init__(
        self,
        nav_timeout: float | None = None,
        settle_delay: float | None = None,
    ) -> None:
        self.nav_timeout = settings.render_nav_timeout if nav_timeout is None else nav_timeout
        self.settle_delay = settings.render_settle_delay if settle_delay is None else settle_delay

    async def render(self, url: str) -> str:
        from playwright.async_api import Error as PlaywrightError  # noqa: PLC0415
        from playwright.async_api import async_playwright  # noqa: PLC0415

        try:
            async with async_playwright() as pw:
                browser = await pw.chromium.launch(headless=True)
                try:
                    page = await browser.new_page(user_agent=BROWSER_UA)
                    await page.goto(
                        url,
                        timeout=int(self.nav_timeout * 1000),
                        wait_until="networkidle",
                    )
                    await asyncio.sleep(self.settle_delay)
                    return await page.content()
                finally:
                    await browser.close()
        except PlaywrightError as exc:
            raise UpstreamError(f"Browser rendering failed: {exc}") from exc


class RenderingProxyFetcher(FetchStrategy):
    """Hosted browser-rendering API with JavaScript execution enabled.

    Fails with :class:`AuthError` before any network call when no API key is
    configured, so a missing secret just moves the pipeline along.
    """

    def __init__(
        self,
        api_key: str | None = None,
        endpoint: str | None = None,
        backend: str | None = None,
        renderer: PlaywrightRenderer | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(client)
        self.api_key = settings.scrapingbee_api_key if api_key is None else api_key
        self.endpoint = endpoint or settings.render_api_url
        self.backend = (backend or settings.render_backend).lower()
        self._renderer = renderer

    @property
    def name(self) -> str:
        return "Browser API"

    async def fetch(self, url: str) -> FetchedContent:
        if self.backend == "playwright":
            renderer = self._renderer or PlaywrightRenderer()
            html = await renderer.render(url)
        else:
            html = await self._fetch_via_proxy(url)

        if len(html.strip()) < settings.min_content_chars:
            raise EmptyContent(f"{self.name} returned almost no content ({len(html)} chars).")
        return FetchedContent(strategy=self.name, url=url, html=html)

    async def _fetch_via_proxy(self, url: str) -> str:
        if not self.api_key:
            raise AuthError(
                "Browser API authentication failed - a rendering API key is "
                "required for JavaScript sites."
            )
        response = await self._get(
            self.endpoint,
            params={
                "api_key": self.api_key,
                "url": url,
                "render_js": "true",
                "premium_proxy": "true",
                "country_code": "us",
            },
            headers={"Accept": "text/html"},
        )
        if response.status_code in (401, 403):
            raise AuthError(
                f"Browser API rejected the API key (HTTP {response.status_code})."
            )
        if not response.is_success:
            raise UpstreamError(
                f"Browser API returned {response.status_code}",
                status=response.status_code,
            )
        return response.text


# ---------------------------------------------------------------------------
# 2. Readability proxy
# ---------------------------------------------------------------------------

class ReadabilityProxyFetcher(FetchStrategy):
    """Hosted readability API returning ``{title, excerpt, textContent|content}``."""

    def __init__(
        self,
        endpoint: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(client)
        self.endpoint = endpoint or settings.readability_api_url

    @property
    def name(self) -> str:
        return "Readability API"

    async def fetch(self, url: str) -> FetchedContent:
        response = await self._get(
            self.endpoint,
            params={"url": url, "html": "true"},
            headers={"Accept": "application/json"},
        )
        if not response.is_success:
            raise UpstreamError(
                f"Readability API returned {response.status_code}",
                status=response.status_code,
            )

        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            raise NoContentExtracted("Readability API returned invalid JSON") from exc
        if not isinstance(data, dict):
            raise NoContentExtracted("Readability API returned an unexpected payload")

        text = data.get("textContent") or data.get("content") or ""
        if not isinstance(text, str) or not text.strip():
            raise NoContentExtracted("No content extracted by Readability API")

        page = RawPageContent(
            title=collapse_whitespace(str(data.get("title") or "")),
            meta_description=collapse_whitespace(str(data.get("excerpt") or "")),
            body_text=truncate_excerpt(collapse_whitespace(text)),
        )
        return FetchedContent(strategy=self.name, url=url, html=text, page=page)


# ---------------------------------------------------------------------------
# 3. Direct fetch
# ---------------------------------------------------------------------------

class DirectFetcher(FetchStrategy):
    """Plain GET with browser-like headers."""

    @property
    def name(self) -> str:
        return "Direct Fetch"

    async def fetch(self, url: str) -> FetchedContent:
        response = await self._get(url, headers=_BROWSER_HEADERS)
        if not response.is_success:
            raise HttpError(response.status_code, response.reason_phrase)

        html = response.text
        if is_likely_spa(html):
            raise LikelySPA(
                "This appears to be a JavaScript-heavy Single Page Application. "
                "The page content is minimal without JavaScript execution."
            )
        logger.debug(f"[{self.name}] {len(html)} chars from {url}")
        return FetchedContent(strategy=self.name, url=url, html=html)


# ---------------------------------------------------------------------------
# Default strategy list
# ---------------------------------------------------------------------------

def build_default_strategies(client: httpx.AsyncClient | None = None) -> list[FetchStrategy]:
    """Rendering proxy → readability proxy → direct fetch."""
    return [
        RenderingProxyFetcher(client=client),
        ReadabilityProxyFetcher(client=client),
        DirectFetcher(client=client),
    ]
