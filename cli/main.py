"""toolshelf CLI: entry-point for extraction and catalog operations.

Usage:
    python cli/main.py --help

Commands:
    extract     → URL → structured tool record (multi-strategy fallback)
    find-logo   → check conventional logo paths on a site
    catalog     → filter a catalog snapshot, AI search suggestions
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from toolshelf.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import typer

from toolshelf.log import configure_logging

from cli.commands.catalog import catalog_app
from cli.commands.extract import extract, find_logo_cmd

app = typer.Typer(
    name="toolshelf",
    help="toolshelf backend CLI.",
    no_args_is_help=True,
)


@app.callback()
def main(
    log_level: str = typer.Option("", "--log-level", help="Override LOG_LEVEL for this run."),
) -> None:
    """Configure logging before any command runs."""
    configure_logging(log_level or None)


app.command("extract")(extract)
app.command("find-logo")(find_logo_cmd)
app.add_typer(catalog_app, name="catalog")


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
