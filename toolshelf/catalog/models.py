"""Dataclass models for catalog entries and filter specifications.

These are plain Python objects mirroring the rows the hosted store returns.
The store itself lives outside this package; the filter engine only ever
holds a read-only snapshot of :class:`ToolCatalogEntry` objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable

from toolshelf.errors import InvalidInput


class PricingTier(str, Enum):
    FREE = "Free"
    FREEMIUM = "Freemium"
    PAID = "Paid"
    CONTACT_US = "Contact Us"

    @classmethod
    def parse(cls, value: Any) -> "PricingTier | None":
        """Case-insensitive lookup by value; ``None`` when nothing matches."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        wanted = value.strip().lower()
        for tier in cls:
            if tier.value.lower() == wanted:
                return tier
        return None


class SourceType(str, Enum):
    OPEN_SOURCE = "Open Source"
    CLOSED_SOURCE = "Closed Source"

    @classmethod
    def parse(cls, value: Any) -> "SourceType | None":
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        wanted = value.strip().lower()
        for source in cls:
            if source.value.lower() == wanted:
                return source
        return None


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    return datetime.fromtimestamp(0, tz=timezone.utc)


@dataclass(frozen=True)
class ToolCategory:
    id: str
    name: str
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ToolCategory":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            description=str(data.get("description", "")),
        )


@dataclass(frozen=True)
class ToolComment:
    id: str
    tool_id: str
    user_id: str
    username: str
    text: str
    upvotes: int = 0
    created_at: datetime = field(
        default_factory=lambda: datetime.fromtimestamp(0, tz=timezone.utc)
    )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ToolComment":
        return cls(
            id=str(data["id"]),
            tool_id=str(data.get("toolId") or data.get("tool_id") or ""),
            user_id=str(data.get("userId") or data.get("user_id") or ""),
            username=str(data.get("username") or ""),
            text=str(data.get("text") or ""),
            upvotes=int(data.get("upvotes") or 0),
            created_at=_parse_timestamp(data.get("createdAt", data.get("created_at"))),
        )


@dataclass(frozen=True)
class ToolCatalogEntry:
    """One persisted tool as displayed in the directory."""

    id: str
    name: str
    short_description: str
    pricing: PricingTier
    source: SourceType
    upvotes: int = 0
    full_description: str = ""
    website_url: str = ""
    logo_url: str = ""
    categories: frozenset[str] = frozenset()
    tags: tuple[str, ...] = ()
    features: tuple[str, ...] = ()
    use_cases: tuple[str, ...] = ()
    comments: tuple[ToolComment, ...] = ()
    created_at: datetime = field(
        default_factory=lambda: datetime.fromtimestamp(0, tz=timezone.utc)
    )
    updated_at: datetime = field(
        default_factory=lambda: datetime.fromtimestamp(0, tz=timezone.utc)
    )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ToolCatalogEntry":
        """Build an entry from the store's camelCase (or snake_case) row shape.

        Raises:
            InvalidInput: If ``pricing`` or ``source`` is not a known value.
        """
        pricing = PricingTier.parse(data.get("pricing"))
        if pricing is None:
            raise InvalidInput(f"Unknown pricing tier: {data.get('pricing')!r}")
        source = SourceType.parse(data.get("source") or SourceType.CLOSED_SOURCE)
        if source is None:
            raise InvalidInput(f"Unknown source type: {data.get('source')!r}")

        def _get(camel: str, snake: str, default: Any) -> Any:
            value = data.get(camel, data.get(snake))
            return default if value is None else value

        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            short_description=str(_get("shortDescription", "short_description", "")),
            full_description=str(_get("fullDescription", "full_description", "")),
            website_url=str(_get("websiteUrl", "website_url", "")),
            logo_url=str(_get("logoUrl", "logo_url", "")),
            pricing=pricing,
            source=source,
            upvotes=int(data.get("upvotes") or 0),
            categories=frozenset(str(c) for c in data.get("categories") or []),
            tags=tuple(str(t) for t in data.get("tags") or []),
            features=tuple(str(f) for f in data.get("features") or []),
            use_cases=tuple(str(u) for u in _get("useCases", "use_cases", [])),
            comments=tuple(ToolComment.from_dict(c) for c in data.get("comments") or []),
            created_at=_parse_timestamp(_get("createdAt", "created_at", None)),
            updated_at=_parse_timestamp(_get("updatedAt", "updated_at", None)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "shortDescription": self.short_description,
            "fullDescription": self.full_description,
            "websiteUrl": self.website_url,
            "logoUrl": self.logo_url,
            "pricing": self.pricing.value,
            "source": self.source.value,
            "upvotes": self.upvotes,
            "categories": sorted(self.categories),
            "tags": list(self.tags),
            "features": list(self.features),
            "useCases": list(self.use_cases),
            "comments": [
                {
                    "id": c.id,
                    "toolId": c.tool_id,
                    "userId": c.user_id,
                    "username": c.username,
                    "text": c.text,
                    "upvotes": c.upvotes,
                    "createdAt": c.created_at.isoformat(),
                }
                for c in self.comments
            ],
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }


@dataclass(frozen=True)
class FilterSpec:
    """Active search / category / pricing / source constraints.

    An empty string or empty set means "no constraint" on that dimension.
    Use :meth:`build` to construct from loose UI values.
    """

    search_term: str = ""
    categories: frozenset[str] = frozenset()
    pricing: frozenset[PricingTier] = frozenset()
    sources: frozenset[SourceType] = frozenset()

    @classmethod
    def build(
        cls,
        search_term: str = "",
        categories: Iterable[str] = (),
        pricing: Iterable[str | PricingTier] = (),
        sources: Iterable[str | SourceType] = (),
    ) -> "FilterSpec":
        """Validate and normalise filter values.

        Raises:
            InvalidInput: If any pricing tier or source type is unknown.
        """
        tiers: set[PricingTier] = set()
        for value in pricing:
            tier = PricingTier.parse(value)
            if tier is None:
                raise InvalidInput(f"Unknown pricing tier: {value!r}")
            tiers.add(tier)

        source_types: set[SourceType] = set()
        for value in sources:
            source = SourceType.parse(value)
            if source is None:
                raise InvalidInput(f"Unknown source type: {value!r}")
            source_types.add(source)

        return cls(
            search_term=(search_term or "").strip(),
            categories=frozenset(str(c) for c in categories if str(c)),
            pricing=frozenset(tiers),
            sources=frozenset(source_types),
        )

    @property
    def is_empty(self) -> bool:
        return not (self.search_term or self.categories or self.pricing or self.sources)


@dataclass(frozen=True)
class SearchSuggestion:
    categories: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, list[str]]:
        return {"categories": list(self.categories), "keywords": list(self.keywords)}
