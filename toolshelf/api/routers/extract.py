"""Extraction endpoints.

Routes
------
POST /extract        Body: {"url": "https://..."}   → extracted tool record
POST /extract/logo   Body: {"url": "https://..."}   → {"logoUrl": str | null}

A failed extraction answers 502 with ``{"message", "manualEntry": true}`` so
the form can show the message and let the admin carry on by hand.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from toolshelf.errors import ExtractionFailed, InvalidInput, StructuredDataError
from toolshelf.scraper.pipeline import find_logo

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class UrlRequest(BaseModel):
    url: str


class LogoResponse(BaseModel):
    logoUrl: str | None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("")
async def extract_endpoint(body: UrlRequest, request: Request) -> dict[str, Any]:
    """Fetch the page behind *url* and return a structured tool record."""
    pipeline = request.app.state.pipeline
    try:
        record = await pipeline.extract(body.url)
    except InvalidInput as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except (ExtractionFailed, StructuredDataError) as exc:
        raise HTTPException(
            status_code=502,
            detail={
                "message": str(exc),
                "reason": type(exc).__name__,
                "manualEntry": True,
            },
        ) from exc
    return record.to_dict()


@router.post("/logo", response_model=LogoResponse)
async def find_logo_endpoint(body: UrlRequest, request: Request) -> dict[str, Any]:
    """Check conventional logo paths on the site's origin."""
    client = getattr(request.app.state, "http", None)
    return {"logoUrl": await find_logo(body.url, client=client)}
