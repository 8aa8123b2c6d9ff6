"""Tests for the catalog filter engine and its models."""

from __future__ import annotations

import pytest

from toolshelf.catalog import FilterSpec, PricingTier, SourceType, ToolCatalogEntry, filter_catalog
from toolshelf.catalog.filtering import match_entry
from toolshelf.errors import InvalidInput


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _entry(
    id: str,
    name: str,
    upvotes: int = 0,
    *,
    description: str = "",
    tags: tuple[str, ...] = (),
    categories: tuple[str, ...] = (),
    pricing: PricingTier = PricingTier.FREE,
    source: SourceType = SourceType.CLOSED_SOURCE,
) -> ToolCatalogEntry:
    return ToolCatalogEntry(
        id=id,
        name=name,
        short_description=description,
        pricing=pricing,
        source=source,
        upvotes=upvotes,
        categories=frozenset(categories),
        tags=tags,
    )


@pytest.fixture()
def catalog() -> list[ToolCatalogEntry]:
    return [
        _entry("a", "PixelForge", 10, description="AI image generator",
               tags=("art",), categories=("img",), pricing=PricingTier.FREEMIUM),
        _entry("b", "CodePal", 5, description="Pair programmer",
               tags=("coding", "IDE"), categories=("code",), pricing=PricingTier.PAID),
        _entry("c", "Chatty", 20, description="Chat assistant",
               tags=("chatbot",), categories=("chat", "img"),
               source=SourceType.OPEN_SOURCE),
        _entry("d", "WriteRight", 5, description="Copywriting for marketing",
               tags=("text",), categories=("text",), pricing=PricingTier.FREEMIUM),
    ]


def _ids(entries: list[ToolCatalogEntry]) -> list[str]:
    return [e.id for e in entries]


# ---------------------------------------------------------------------------
# filter_catalog
# ---------------------------------------------------------------------------

class TestFilterCatalog:
    def test_empty_spec_sorts_by_upvotes(self, catalog) -> None:
        assert _ids(filter_catalog(catalog, FilterSpec())) == ["c", "a", "b", "d"]

    def test_ties_keep_input_order(self) -> None:
        entries = [_entry("x", "X", 3), _entry("y", "Y", 3), _entry("z", "Z", 7)]
        assert _ids(filter_catalog(entries, FilterSpec())) == ["z", "x", "y"]

    def test_upvote_ordering_example(self) -> None:
        entries = [_entry("A", "A", 5), _entry("B", "B", 5), _entry("C", "C", 9)]
        assert _ids(filter_catalog(entries, FilterSpec())) == ["C", "A", "B"]

    @pytest.mark.parametrize("term", ["chatgpt", "CHAT", "ChatGPT"])
    def test_name_match_ignores_case(self, term: str) -> None:
        entries = [_entry("g", "ChatGPT", 1), _entry("x", "Other", 2)]
        assert _ids(filter_catalog(entries, FilterSpec.build(search_term=term))) == ["g"]

    def test_search_is_case_insensitive(self, catalog) -> None:
        spec = FilterSpec.build(search_term="PIXEL")
        assert _ids(filter_catalog(catalog, spec)) == ["a"]

    def test_search_matches_description_and_tags(self, catalog) -> None:
        assert _ids(filter_catalog(catalog, FilterSpec.build(search_term="assistant"))) == ["c"]
        assert _ids(filter_catalog(catalog, FilterSpec.build(search_term="ide"))) == ["b"]

    def test_category_any_of(self, catalog) -> None:
        spec = FilterSpec.build(categories=["img"])
        assert _ids(filter_catalog(catalog, spec)) == ["c", "a"]

    def test_dimensions_combine_with_and(self, catalog) -> None:
        spec = FilterSpec.build(categories=["img"], pricing=["Freemium"])
        assert _ids(filter_catalog(catalog, spec)) == ["a"]

    def test_source_filter(self, catalog) -> None:
        spec = FilterSpec.build(sources=["open source"])
        assert _ids(filter_catalog(catalog, spec)) == ["c"]

    def test_no_match_is_empty_list(self, catalog) -> None:
        assert filter_catalog(catalog, FilterSpec.build(search_term="zzz")) == []

    def test_idempotent(self, catalog) -> None:
        spec = FilterSpec.build(pricing=["Freemium", "Paid"])
        once = filter_catalog(catalog, spec)
        assert filter_catalog(once, spec) == once

    def test_does_not_mutate_input(self, catalog) -> None:
        before = list(catalog)
        filter_catalog(catalog, FilterSpec())
        assert catalog == before

    def test_narrowing_never_adds(self, catalog) -> None:
        broad = filter_catalog(catalog, FilterSpec.build(pricing=["Freemium"]))
        narrow = filter_catalog(catalog, FilterSpec.build(pricing=["Freemium"], search_term="write"))
        assert set(_ids(narrow)) <= set(_ids(broad))


def test_match_entry_whitespace_search(catalog) -> None:
    assert match_entry(catalog[0], FilterSpec(search_term="   "))


# ---------------------------------------------------------------------------
# FilterSpec / ToolCatalogEntry
# ---------------------------------------------------------------------------

class TestFilterSpecBuild:
    def test_unknown_pricing(self) -> None:
        with pytest.raises(InvalidInput):
            FilterSpec.build(pricing=["Lifetime"])

    def test_unknown_source(self) -> None:
        with pytest.raises(InvalidInput):
            FilterSpec.build(sources=["Shared Source"])

    def test_normalises_values(self) -> None:
        spec = FilterSpec.build(search_term="  foo ", pricing=["free", PricingTier.PAID])
        assert spec.search_term == "foo"
        assert spec.pricing == frozenset({PricingTier.FREE, PricingTier.PAID})
        assert not spec.is_empty

    def test_empty(self) -> None:
        assert FilterSpec.build().is_empty


class TestCatalogEntryFromDict:
    def test_camel_case_row(self) -> None:
        entry = ToolCatalogEntry.from_dict(
            {
                "id": "t1",
                "name": "Tool",
                "shortDescription": "Short",
                "pricing": "Contact Us",
                "source": "Open Source",
                "upvotes": 4,
                "categories": ["c1"],
                "useCases": ["u"],
                "createdAt": "2024-01-02T03:04:05Z",
            }
        )
        assert entry.short_description == "Short"
        assert entry.pricing is PricingTier.CONTACT_US
        assert entry.source is SourceType.OPEN_SOURCE
        assert entry.categories == frozenset({"c1"})
        assert entry.use_cases == ("u",)
        assert entry.created_at.year == 2024

    def test_unknown_pricing_rejected(self) -> None:
        with pytest.raises(InvalidInput):
            ToolCatalogEntry.from_dict({"id": "t1", "name": "T", "pricing": "Cheap"})

    def test_null_fields_take_defaults(self) -> None:
        entry = ToolCatalogEntry.from_dict(
            {
                "id": "t1",
                "name": None,
                "pricing": "Free",
                "source": None,
                "upvotes": None,
                "categories": None,
                "tags": None,
                "features": None,
                "comments": None,
            }
        )
        assert entry.name == ""
        assert entry.source is SourceType.CLOSED_SOURCE
        assert entry.upvotes == 0
        assert entry.categories == frozenset()
        assert entry.tags == ()
        assert filter_catalog([entry], FilterSpec.build(search_term="x")) == []

    def test_non_numeric_upvotes_rejected(self) -> None:
        with pytest.raises(ValueError):
            ToolCatalogEntry.from_dict({"id": "t1", "name": "T", "pricing": "Free", "upvotes": "lots"})

    def test_round_trip_keys(self) -> None:
        entry = ToolCatalogEntry.from_dict({"id": "t1", "name": "T", "pricing": "Free"})
        data = entry.to_dict()
        assert data["pricing"] == "Free"
        assert data["source"] == "Closed Source"
