"""Catalog endpoints: filtering and AI search suggestions.

Routes
------
POST /catalog/filter    Body: {"entries": [...], "spec": {...}}
POST /catalog/suggest   Body: {"query": "...", "categories": [...]}

The catalog itself lives in the hosted store; callers post the snapshot they
already hold and get the filtered, ranked subset back.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from toolshelf.catalog.filtering import filter_catalog
from toolshelf.catalog.models import FilterSpec, ToolCatalogEntry, ToolCategory
from toolshelf.errors import InvalidInput

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class FilterSpecBody(BaseModel):
    searchTerm: str = ""
    categories: list[str] = Field(default_factory=list)
    pricing: list[str] = Field(default_factory=list)
    sources: list[str] = Field(default_factory=list)


class FilterRequest(BaseModel):
    entries: list[dict[str, Any]]
    spec: FilterSpecBody = Field(default_factory=FilterSpecBody)


class FilterResponse(BaseModel):
    total: int
    matched: int
    entries: list[dict[str, Any]]


class CategoryBody(BaseModel):
    id: str
    name: str
    description: str = ""


class SuggestRequest(BaseModel):
    query: str
    categories: list[CategoryBody] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/filter", response_model=FilterResponse)
def filter_endpoint(body: FilterRequest) -> dict[str, Any]:
    """Filter and rank a catalog snapshot."""
    try:
        entries = [ToolCatalogEntry.from_dict(e) for e in body.entries]
        spec = FilterSpec.build(
            search_term=body.spec.searchTerm,
            categories=body.spec.categories,
            pricing=body.spec.pricing,
            sources=body.spec.sources,
        )
    except InvalidInput as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except (KeyError, TypeError, ValueError) as exc:
        raise HTTPException(status_code=422, detail=f"Malformed entry: {exc}") from exc

    results = filter_catalog(entries, spec)
    return {
        "total": len(entries),
        "matched": len(results),
        "entries": [e.to_dict() for e in results],
    }


@router.post("/suggest")
async def suggest_endpoint(body: SuggestRequest, request: Request) -> dict[str, list[str]] | None:
    """Suggest categories and keywords for a free-text query (``null`` if blank)."""
    suggester = request.app.state.suggester
    categories = [
        ToolCategory(id=c.id, name=c.name, description=c.description)
        for c in body.categories
    ]
    suggestion = await suggester.suggest(body.query, categories)
    return suggestion.to_dict() if suggestion is not None else None
