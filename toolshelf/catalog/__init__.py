"""Catalog package: entry models, filtering, debouncing and search suggestions."""

from toolshelf.catalog.filtering import filter_catalog, match_entry
from toolshelf.catalog.models import (
    FilterSpec,
    PricingTier,
    SearchSuggestion,
    SourceType,
    ToolCatalogEntry,
    ToolCategory,
)

__all__ = [
    "FilterSpec",
    "PricingTier",
    "SearchSuggestion",
    "SourceType",
    "ToolCatalogEntry",
    "ToolCategory",
    "filter_catalog",
    "match_entry",
]
