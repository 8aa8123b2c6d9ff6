"""Extraction commands: URL → structured tool record, logo discovery."""

from __future__ import annotations

import asyncio
import json

import typer

from toolshelf.errors import ExtractionFailed, InvalidInput, StructuredDataError
from toolshelf.scraper.pipeline import build_default_pipeline, find_logo

from cli.rendering import render_record


def extract(
    url: str = typer.Option(..., help="Tool website URL."),
    as_json: bool = typer.Option(False, "--json", help="Print the record as JSON."),
) -> None:
    """Extract a structured tool record from a website."""
    typer.echo(f"[extract] Extracting {url!r} …", err=True)
    try:
        record = asyncio.run(build_default_pipeline().extract(url))
    except InvalidInput as exc:
        typer.echo(f"❌ {exc}", err=True)
        raise typer.Exit(code=2)
    except (ExtractionFailed, StructuredDataError) as exc:
        typer.echo(f"❌ {exc}", err=True)
        typer.echo("Fill in the tool details manually.", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(record.to_dict(), indent=2))
    else:
        typer.echo(render_record(record))


def find_logo_cmd(
    url: str = typer.Option(..., help="Tool website URL."),
) -> None:
    """Check conventional logo paths (/logo.png, /favicon.ico, …) on a site."""
    logo = asyncio.run(find_logo(url))
    if logo is None:
        typer.echo("No logo found.")
        raise typer.Exit(code=1)
    typer.echo(logo)
