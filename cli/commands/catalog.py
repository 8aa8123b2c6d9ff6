"""Catalog commands: filter a JSON catalog snapshot, get search suggestions."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import List, Optional

import typer

from toolshelf.catalog.filtering import filter_catalog
from toolshelf.catalog.models import FilterSpec, ToolCatalogEntry, ToolCategory
from toolshelf.catalog.suggestions import SearchSuggester
from toolshelf.errors import InvalidInput

from cli.rendering import render_entries

catalog_app = typer.Typer(help="Search and filter the tool catalog.", no_args_is_help=True)


def _load_json(path: Path) -> list:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        typer.echo(f"❌ Cannot read {path}: {exc}", err=True)
        raise typer.Exit(code=2)
    if not isinstance(data, list):
        typer.echo(f"❌ {path} must contain a JSON array.", err=True)
        raise typer.Exit(code=2)
    return data


@catalog_app.command("filter")
def catalog_filter(
    file: Path = typer.Option(..., "--file", help="JSON array of catalog entries."),
    search: str = typer.Option("", help="Free-text search term."),
    category: Optional[List[str]] = typer.Option(None, "--category", help="Category id (repeatable)."),
    pricing: Optional[List[str]] = typer.Option(None, "--pricing", help="Pricing tier (repeatable)."),
    source: Optional[List[str]] = typer.Option(None, "--source", help="Source type (repeatable)."),
) -> None:
    """Filter a catalog snapshot and list matches, most upvoted first."""
    try:
        entries = [ToolCatalogEntry.from_dict(row) for row in _load_json(file)]
        spec = FilterSpec.build(
            search_term=search,
            categories=category or [],
            pricing=pricing or [],
            sources=source or [],
        )
    except (InvalidInput, KeyError, TypeError, ValueError) as exc:
        typer.echo(f"❌ {exc}", err=True)
        raise typer.Exit(code=2)

    results = filter_catalog(entries, spec)
    typer.echo(f"[catalog filter] {len(results)} of {len(entries)} tools")
    typer.echo(render_entries(results))


@catalog_app.command("suggest")
def catalog_suggest(
    query: str = typer.Option(..., help="Free-text search query."),
    categories_file: Optional[Path] = typer.Option(
        None, "--categories-file", help="JSON array of {id, name, description}."
    ),
) -> None:
    """Suggest categories and keywords for a search query."""
    categories = (
        [ToolCategory.from_dict(row) for row in _load_json(categories_file)]
        if categories_file
        else []
    )
    suggestion = asyncio.run(SearchSuggester().suggest(query, categories))
    if suggestion is None:
        typer.echo("Empty query.")
        raise typer.Exit(code=1)
    typer.echo(f"Categories : {', '.join(suggestion.categories) or '(none)'}")
    typer.echo(f"Keywords   : {', '.join(suggestion.keywords) or '(none)'}")
