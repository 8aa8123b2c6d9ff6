"""HTML normalisation: turns raw markup into a bounded :class:`RawPageContent`."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, Tag

from toolshelf.config import settings
from toolshelf.scraper.models import RawPageContent
from toolshelf.scraper.urls import resolve_url

# Structural chrome that would pollute the excerpt.
_STRIP_TAGS = ["script", "style", "nav", "header", "footer", "aside", "noscript"]

# Bot walls, JS-required shells and rate-limit pages.
BLOCKED_SIGNATURES = (
    "JavaScript and Cookies Enablement",
    "Enable JavaScript and cookies to continue",
    "JavaScript is required",
    "Please enable JavaScript",
    "Access Denied",
    "403 Forbidden",
    "Rate Limited",
)

_WHITESPACE = re.compile(r"\s+")

# Fraction of the budget within which truncation backs off to a word break.
_WORD_BREAK_WINDOW = 0.2


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _attr(tag: Tag | None, name: str) -> str:
    if tag is None:
        return ""
    value = tag.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return (value or "").strip()


def _meta(soup: BeautifulSoup, *, name: str | None = None, prop: str | None = None) -> str:
    if name is not None:
        tag = soup.find("meta", attrs={"name": re.compile(f"^{re.escape(name)}$", re.I)})
    else:
        tag = soup.find("meta", attrs={"property": re.compile(f"^{re.escape(prop or '')}$", re.I)})
    return _attr(tag, "content")


def _extract_title(soup: BeautifulSoup) -> str:
    """``<title>`` text, else the first ``<h1>``, else empty string."""
    if soup.title is not None:
        title = collapse_whitespace(soup.title.get_text())
        if title:
            return title
    heading = soup.find("h1")
    if heading is not None:
        return collapse_whitespace(heading.get_text())
    return ""


def _extract_description(soup: BeautifulSoup) -> str:
    return _meta(soup, name="description") or _meta(soup, prop="og:description")


def _icon_link(soup: BeautifulSoup) -> str:
    for link in soup.find_all("link", href=True):
        rels = link.get("rel") or []
        if isinstance(rels, str):
            rels = rels.split()
        rels = [r.lower() for r in rels]
        if "icon" in rels or "apple-touch-icon" in rels:
            return _attr(link, "href")
    return ""


def _logo_image(soup: BeautifulSoup) -> str:
    for img in soup.find_all("img", src=True):
        if "logo" in _attr(img, "alt").lower():
            return _attr(img, "src")
    return ""


def _extract_logo(soup: BeautifulSoup, source_url: str) -> str:
    """First resolvable of og:image, icon link, or an image alt-tagged "logo"."""
    for candidate in (_meta(soup, prop="og:image"), _icon_link(soup), _logo_image(soup)):
        resolved = resolve_url(candidate, source_url)
        if resolved:
            return resolved
    return ""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text or "").strip()


def truncate_excerpt(text: str, limit: int | None = None) -> str:
    """Cut *text* to at most *limit* characters, preferring a word boundary.

    If the hard cut lands inside a word and a space exists within the last
    20% of the budget, the excerpt ends at that space instead.
    """
    limit = settings.excerpt_max_chars if limit is None else limit
    if limit <= 0:
        return ""
    if len(text) <= limit:
        return text
    cut = text[:limit]
    if text[limit].isspace() or cut[-1].isspace():
        return cut.rstrip()
    space = cut.rfind(" ")
    if space >= int(limit * (1 - _WORD_BREAK_WINDOW)):
        return cut[:space].rstrip()
    return cut


def is_blocked(text: str) -> bool:
    """Return ``True`` if *text* matches a known blocked / JS-wall signature."""
    lowered = (text or "").lower()
    return any(sig.lower() in lowered for sig in BLOCKED_SIGNATURES)


def normalize(raw_html: str, source_url: str) -> RawPageContent:
    """Strip chrome from *raw_html* and derive title, description, logo and a
    bounded body excerpt.

    Metadata is read before stripping, so a ``<title>`` inside ``<head>``
    and an ``<h1>`` inside ``<header>`` are still considered.
    """
    soup = BeautifulSoup(raw_html or "", "html.parser")

    title = _extract_title(soup)
    description = _extract_description(soup)
    logo_url = _extract_logo(soup, source_url)

    for tag in soup(_STRIP_TAGS):
        tag.decompose()

    container = soup.find("main") or soup.find(attrs={"role": "main"})
    root = container if container is not None else (soup.body or soup)
    body_text = truncate_excerpt(collapse_whitespace(root.get_text(separator=" ")))

    return RawPageContent(
        title=title,
        meta_description=description,
        body_text=body_text,
        logo_url=logo_url,
    )
