"""Plain-text rendering of records and catalog entries for the CLI."""

from __future__ import annotations

from typing import List

from toolshelf.catalog.models import ToolCatalogEntry
from toolshelf.scraper.models import ExtractedToolRecord


def _bullets(items: List[str], indent: str = "    ") -> List[str]:
    return [f"{indent}- {item}" for item in items]


def render_record(record: ExtractedToolRecord) -> str:
    """Render an extracted record as a labelled, human-readable block."""
    lines = [
        f"Name        : {record.name}",
        f"Pricing     : {record.pricing.value}",
        f"Logo        : {record.logo_url or '(none)'}",
        f"Tags        : {', '.join(record.tags)}",
        "Description :",
        f"    {record.description}",
        "Features    :",
        *_bullets(record.features),
        "Use cases   :",
        *_bullets(record.use_cases),
    ]
    return "\n".join(lines)


def render_entries(entries: List[ToolCatalogEntry]) -> str:
    """One line per entry: upvotes, name, pricing, source and tags."""
    if not entries:
        return "No tools match the current filters."
    width = max(len(str(e.upvotes)) for e in entries)
    lines = []
    for e in entries:
        tags = f"  #{' #'.join(e.tags)}" if e.tags else ""
        lines.append(
            f"  ▲{e.upvotes:>{width}}  {e.name}  [{e.pricing.value} · {e.source.value}]{tags}"
        )
    return "\n".join(lines)
