"""Catalog search / filter engine.

``filter_catalog`` is a pure function: the same entries and spec always give
the same output, and applying it twice changes nothing.  Dimensions combine
with AND; an empty dimension matches everything.  Survivors are ordered by
descending upvotes with ties kept in input order (``sorted`` is stable).
"""

from __future__ import annotations

from typing import Iterable

from toolshelf.catalog.models import FilterSpec, ToolCatalogEntry


def _matches_text(entry: ToolCatalogEntry, needle: str) -> bool:
    if not needle:
        return True
    return (
        needle in entry.name.lower()
        or needle in entry.short_description.lower()
        or any(needle in tag.lower() for tag in entry.tags)
    )


def match_entry(entry: ToolCatalogEntry, spec: FilterSpec) -> bool:
    """Return ``True`` if *entry* satisfies every active dimension of *spec*."""
    if not _matches_text(entry, spec.search_term.strip().lower()):
        return False
    if spec.categories and entry.categories.isdisjoint(spec.categories):
        return False
    if spec.pricing and entry.pricing not in spec.pricing:
        return False
    if spec.sources and entry.source not in spec.sources:
        return False
    return True


def filter_catalog(
    entries: Iterable[ToolCatalogEntry],
    spec: FilterSpec,
) -> list[ToolCatalogEntry]:
    """Return the entries matching *spec*, most upvoted first.

    Args:
        entries: A read-only snapshot of the catalog.
        spec: Active constraints; see :class:`FilterSpec`.

    Returns:
        A new list; *entries* is not modified.
    """
    matched = [entry for entry in entries if match_entry(entry, spec)]
    return sorted(matched, key=lambda entry: entry.upvotes, reverse=True)
