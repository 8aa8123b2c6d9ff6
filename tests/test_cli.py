"""Tests for the toolshelf CLI (extract, find-logo, catalog filter/suggest)."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from cli.main import app
from toolshelf.catalog.models import PricingTier, SearchSuggestion
from toolshelf.errors import AuthError, ExtractionFailed, InvalidInput
from toolshelf.scraper.models import ExtractedToolRecord

runner = CliRunner()


_RECORD = ExtractedToolRecord(
    name="Example",
    description="A whiteboard.",
    features=["Canvas", "Cursors"],
    use_cases=["Workshops"],
    pricing=PricingTier.FREEMIUM,
    tags=["whiteboard"],
)


class _FakePipeline:
    def __init__(self, result=None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error

    async def extract(self, url: str):
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture()
def catalog_file(tmp_path: Path) -> Path:
    path = tmp_path / "catalog.json"
    path.write_text(
        json.dumps(
            [
                {"id": "a", "name": "PixelForge", "shortDescription": "Images",
                 "pricing": "Freemium", "upvotes": 3, "tags": ["art"], "categories": ["img"]},
                {"id": "b", "name": "Chatty", "shortDescription": "Chat",
                 "pricing": "Free", "upvotes": 9, "categories": ["chat"]},
            ]
        ),
        encoding="utf-8",
    )
    return path


# ---------------------------------------------------------------------------
# extract / find-logo
# ---------------------------------------------------------------------------

def test_extract_renders_record(monkeypatch) -> None:
    monkeypatch.setattr(
        "cli.commands.extract.build_default_pipeline", lambda: _FakePipeline(result=_RECORD)
    )
    result = runner.invoke(app, ["extract", "--url", "https://example.com"])
    assert result.exit_code == 0
    assert "Name        : Example" in result.stdout
    assert "    - Cursors" in result.stdout


def test_extract_json(monkeypatch) -> None:
    monkeypatch.setattr(
        "cli.commands.extract.build_default_pipeline", lambda: _FakePipeline(result=_RECORD)
    )
    result = runner.invoke(app, ["extract", "--url", "https://example.com", "--json"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout[result.stdout.index("{"):])
    assert payload["pricing"] == "Freemium"


def test_extract_failure_suggests_manual_entry(monkeypatch) -> None:
    error = ExtractionFailed(AuthError("no key"))
    monkeypatch.setattr(
        "cli.commands.extract.build_default_pipeline", lambda: _FakePipeline(error=error)
    )
    result = runner.invoke(app, ["extract", "--url", "https://example.com"])
    assert result.exit_code == 1
    assert "manually" in result.output


def test_extract_invalid_url(monkeypatch) -> None:
    monkeypatch.setattr(
        "cli.commands.extract.build_default_pipeline",
        lambda: _FakePipeline(error=InvalidInput("Not an absolute http(s) URL")),
    )
    result = runner.invoke(app, ["extract", "--url", "example.com"])
    assert result.exit_code == 2


def test_find_logo(monkeypatch) -> None:
    async def _fake_find_logo(url, client=None):
        return "https://example.com/logo.svg"

    monkeypatch.setattr("cli.commands.extract.find_logo", _fake_find_logo)
    result = runner.invoke(app, ["find-logo", "--url", "https://example.com"])
    assert result.exit_code == 0
    assert "https://example.com/logo.svg" in result.stdout


def test_find_logo_none(monkeypatch) -> None:
    async def _fake_find_logo(url, client=None):
        return None

    monkeypatch.setattr("cli.commands.extract.find_logo", _fake_find_logo)
    result = runner.invoke(app, ["find-logo", "--url", "https://example.com"])
    assert result.exit_code == 1
    assert "No logo found." in result.stdout


# ---------------------------------------------------------------------------
# catalog
# ---------------------------------------------------------------------------

def test_catalog_filter_ranks_by_upvotes(catalog_file: Path) -> None:
    result = runner.invoke(app, ["catalog", "filter", "--file", str(catalog_file)])
    assert result.exit_code == 0
    assert "2 of 2 tools" in result.stdout
    assert result.stdout.index("Chatty") < result.stdout.index("PixelForge")


def test_catalog_filter_with_options(catalog_file: Path) -> None:
    result = runner.invoke(
        app,
        ["catalog", "filter", "--file", str(catalog_file), "--pricing", "Freemium", "--search", "pixel"],
    )
    assert result.exit_code == 0
    assert "1 of 2 tools" in result.stdout
    assert "#art" in result.stdout


def test_catalog_filter_no_match(catalog_file: Path) -> None:
    result = runner.invoke(app, ["catalog", "filter", "--file", str(catalog_file), "--search", "zzz"])
    assert result.exit_code == 0
    assert "No tools match the current filters." in result.stdout


def test_catalog_filter_bad_pricing(catalog_file: Path) -> None:
    result = runner.invoke(
        app, ["catalog", "filter", "--file", str(catalog_file), "--pricing", "Lifetime"]
    )
    assert result.exit_code == 2


def test_catalog_filter_rejects_non_array(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text('{"id": "a"}', encoding="utf-8")
    result = runner.invoke(app, ["catalog", "filter", "--file", str(path)])
    assert result.exit_code == 2


def test_catalog_filter_tolerates_null_fields(tmp_path: Path) -> None:
    path = tmp_path / "nulls.json"
    path.write_text(
        json.dumps([{"id": "n", "name": "Nullable", "pricing": "Free",
                     "upvotes": None, "categories": None, "tags": None}]),
        encoding="utf-8",
    )
    result = runner.invoke(app, ["catalog", "filter", "--file", str(path)])
    assert result.exit_code == 0
    assert "Nullable" in result.stdout


def test_catalog_filter_rejects_non_numeric_upvotes(tmp_path: Path) -> None:
    path = tmp_path / "bad_upvotes.json"
    path.write_text(
        json.dumps([{"id": "a", "name": "A", "pricing": "Free", "upvotes": "many"}]),
        encoding="utf-8",
    )
    result = runner.invoke(app, ["catalog", "filter", "--file", str(path)])
    assert result.exit_code == 2


def test_catalog_suggest(monkeypatch, tmp_path: Path) -> None:
    class _FakeSuggester:
        async def suggest(self, query, categories):
            return SearchSuggestion(
                categories=tuple(c.name for c in categories),
                keywords=tuple(query.split()),
            )

    monkeypatch.setattr("cli.commands.catalog.SearchSuggester", _FakeSuggester)
    categories = tmp_path / "categories.json"
    categories.write_text(json.dumps([{"id": "1", "name": "Design"}]), encoding="utf-8")

    result = runner.invoke(
        app,
        ["catalog", "suggest", "--query", "logo maker", "--categories-file", str(categories)],
    )
    assert result.exit_code == 0
    assert "Categories : Design" in result.stdout
    assert "Keywords   : logo, maker" in result.stdout


def test_catalog_suggest_blank_query(monkeypatch) -> None:
    monkeypatch.setattr("toolshelf.config.settings.openai_api_key", "")
    result = runner.invoke(app, ["catalog", "suggest", "--query", "   "])
    assert result.exit_code == 1
    assert "Empty query." in result.stdout
