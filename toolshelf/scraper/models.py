"""Data models for the extraction pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from toolshelf.catalog.models import PricingTier
from toolshelf.errors import FetchError
from toolshelf.scraper.urls import resolve_url

FEATURES_PLACEHOLDER = "Feature information not available"
USE_CASES_PLACEHOLDER = "Use case information not available"
DEFAULT_TAGS = ("general",)
DEFAULT_NAME = "Unknown Product"
DEFAULT_DESCRIPTION = "No description available"
DEFAULT_PRICING = PricingTier.CONTACT_US


@dataclass
class RawPageContent:
    """Normalised page data handed to the structured-data extractor."""

    title: str = ""
    meta_description: str = ""
    body_text: str = ""
    logo_url: str = ""


@dataclass
class FetchedContent:
    """What a fetch strategy produced: raw markup or an already-readable page."""

    strategy: str
    url: str
    html: str = ""
    page: RawPageContent | None = None


@dataclass
class FetchOutcome:
    """Tagged result of one strategy attempt: exactly one of content / error."""

    strategy: str
    content: FetchedContent | None = None
    error: FetchError | None = None

    def __post_init__(self) -> None:
        if (self.content is None) == (self.error is None):
            raise ValueError("FetchOutcome needs exactly one of content or error")

    @property
    def ok(self) -> bool:
        return self.content is not None


def _clean_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [
        str(item).strip()
        for item in value
        if isinstance(item, (str, int, float)) and str(item).strip()
    ]


def _clean_str(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


@dataclass
class ExtractedToolRecord:
    """A fully-populated tool record ready to prefill the admin form.

    Construction fails with ``ValueError`` if any required field is empty;
    use :meth:`from_model_reply` to get defaults filled in.
    """

    name: str
    description: str
    features: list[str]
    use_cases: list[str]
    pricing: PricingTier
    tags: list[str]
    logo_url: str | None = None

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must not be empty")
        if not self.description.strip():
            raise ValueError("description must not be empty")
        for label in ("features", "use_cases", "tags"):
            items = getattr(self, label)
            if not items or not all(isinstance(i, str) and i.strip() for i in items):
                raise ValueError(f"{label} must contain at least one non-empty string")
        if not isinstance(self.pricing, PricingTier):
            raise ValueError(f"pricing must be a PricingTier, got {self.pricing!r}")

    @classmethod
    def from_model_reply(
        cls,
        data: dict[str, Any],
        page: RawPageContent,
        source_url: str,
    ) -> "ExtractedToolRecord":
        """Build a record from a parsed model reply, filling safe defaults.

        The logo comes from the model reply when it offers one, otherwise
        from the page; either way it is resolved against *source_url* and
        dropped if it cannot be made absolute.
        """
        logo_candidate = _clean_str(data.get("logoUrl")) or page.logo_url
        return cls(
            name=_clean_str(data.get("name")) or page.title.strip() or DEFAULT_NAME,
            description=(
                _clean_str(data.get("description"))
                or page.meta_description.strip()
                or DEFAULT_DESCRIPTION
            ),
            features=_clean_list(data.get("features")) or [FEATURES_PLACEHOLDER],
            use_cases=_clean_list(data.get("useCases")) or [USE_CASES_PLACEHOLDER],
            pricing=PricingTier.parse(data.get("pricing")) or DEFAULT_PRICING,
            tags=_clean_list(data.get("tags")) or list(DEFAULT_TAGS),
            logo_url=resolve_url(logo_candidate, source_url),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the camelCase JSON shape the form code expects."""
        payload: dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "features": list(self.features),
            "useCases": list(self.use_cases),
            "pricing": self.pricing.value,
            "tags": list(self.tags),
        }
        if self.logo_url:
            payload["logoUrl"] = self.logo_url
        return payload

