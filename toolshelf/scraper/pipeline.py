"""Extraction pipeline: URL → fetch (with fallback) → normalise → model → record.

``ExtractionPipeline.extract`` tries each fetch strategy strictly in order
and stops at the first one that yields usable, non-blocked content.  That
content is normalised and handed to the structured-data extractor, whose
errors propagate unchanged.  If every strategy fails the caller gets a
single :class:`ExtractionFailed` carrying the last strategy's reason; the
form layer then falls back to manual entry.
"""

from __future__ import annotations

import httpx
from loguru import logger

from toolshelf.config import settings
from toolshelf.errors import (
    BlockedContent,
    EmptyContent,
    ExtractionFailed,
    FetchError,
    InvalidInput,
)
from toolshelf.scraper.fetchers import FetchStrategy, build_default_strategies
from toolshelf.scraper.models import ExtractedToolRecord, FetchedContent, RawPageContent
from toolshelf.scraper.normalizer import is_blocked, normalize
from toolshelf.scraper.structured import StructuredDataExtractor
from toolshelf.scraper.urls import site_origin, validate_url

# Conventional logo locations checked by find_logo, in order.
LOGO_PATHS = (
    "/logo.png",
    "/logo.svg",
    "/favicon.ico",
    "/assets/logo.png",
    "/static/logo.png",
    "/images/logo.png",
)


def _to_page(content: FetchedContent) -> RawPageContent:
    """Derive a :class:`RawPageContent` from a strategy's output.

    Raises:
        BlockedContent: The payload is a bot wall / JS-required page.
        EmptyContent: Normalisation left no body text.
    """
    raw_text = content.html or (content.page.body_text if content.page else "")
    if is_blocked(raw_text):
        raise BlockedContent(
            "This website requires JavaScript or is blocking access "
            f"({content.strategy} received a blocked page)."
        )
    page = content.page if content.page is not None else normalize(content.html, content.url)
    if not page.body_text.strip():
        raise EmptyContent(f"{content.strategy} yielded no readable text.")
    return page


class ExtractionPipeline:
    """Sequential fallback over fetch strategies, then structured extraction."""

    def __init__(
        self,
        strategies: list[FetchStrategy],
        extractor: StructuredDataExtractor,
    ) -> None:
        if not strategies:
            raise ValueError("ExtractionPipeline needs at least one fetch strategy")
        self._strategies = strategies
        self._extractor = extractor

    @property
    def strategies(self) -> list[FetchStrategy]:
        return list(self._strategies)

    async def extract(self, url: str) -> ExtractedToolRecord:
        """Turn *url* into a fully populated :class:`ExtractedToolRecord`.

        Raises:
            InvalidInput: *url* is not an absolute http(s) URL (no network).
            ExtractionFailed: Every fetch strategy failed.
            StructuredDataError: A strategy succeeded but the model step
                failed (``ModelUnavailable``, ``EmptyResponse``,
                ``MalformedResponse``).
        """
        target = validate_url(url)
        logger.info(f"[pipeline] starting extraction for {target}")

        attempts: list[tuple[str, str]] = []
        last_error: FetchError | None = None

        for index, strategy in enumerate(self._strategies, start=1):
            logger.info(f"[pipeline] method {index}: {strategy.name}")
            outcome = await strategy.fetch_content(target)

            try:
                if outcome.content is None:
                    raise outcome.error or FetchError(f"{strategy.name} returned nothing")
                page = _to_page(outcome.content)
            except FetchError as exc:
                last_error = exc
                attempts.append((strategy.name, str(exc)))
                logger.warning(f"[pipeline] {strategy.name} failed: {exc}")
                continue

            logger.info(
                f"[pipeline] {strategy.name} succeeded "
                f"(title={page.title!r}, {len(page.body_text)} chars, "
                f"logo={'yes' if page.logo_url else 'no'})"
            )
            return await self._extractor.infer(page, target, strategy.name)

        logger.warning(f"[pipeline] all {len(attempts)} methods failed for {target}")
        raise ExtractionFailed(last_error, attempts)


async def find_logo(url: str, client: httpx.AsyncClient | None = None) -> str | None:
    """Check conventional logo paths on *url*'s origin with HEAD requests.

    Returns the first path answering 2xx, or ``None`` when the URL is invalid
    or nothing responds.
    """
    try:
        origin = site_origin(validate_url(url))
    except InvalidInput:
        return None

    async def _first_hit(http: httpx.AsyncClient) -> str | None:
        for path in LOGO_PATHS:
            candidate = f"{origin}{path}"
            try:
                response = await http.head(candidate)
            except httpx.HTTPError as exc:
                logger.debug(f"[find_logo] {candidate} failed: {exc!r}")
                continue
            if response.is_success:
                return candidate
        return None

    if client is not None:
        return await _first_hit(client)
    async with httpx.AsyncClient(
        timeout=settings.request_timeout,
        follow_redirects=True,
    ) as owned:
        return await _first_hit(owned)


def build_default_pipeline(client: httpx.AsyncClient | None = None) -> ExtractionPipeline:
    """Rendering proxy → readability proxy → direct fetch, then the configured model."""
    return ExtractionPipeline(
        build_default_strategies(client=client),
        StructuredDataExtractor(client=client),
    )
