"""Admin "add tool" autofill: extraction → editable draft, with a manual fallback.

Extraction failures never block the admin: :meth:`AutofillSession.autofill`
always returns a draft.  It is either prefilled from the extracted record or
a mostly-empty manual draft carrying the failure message and guidance.

Each call takes a new attempt ordinal.  A completion only lands in the
session's buffer if no newer attempt has started in the meantime.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Sequence
from urllib.parse import urlparse

from loguru import logger

from toolshelf.catalog.models import PricingTier, SourceType, ToolCategory
from toolshelf.errors import ExtractionFailed, LikelySPA, StructuredDataError
from toolshelf.scraper.models import ExtractedToolRecord
from toolshelf.scraper.pipeline import ExtractionPipeline
from toolshelf.scraper.urls import validate_url

MANUAL_ENTRY_HINT = "Don't worry - you can manually enter the details below."

_JS_PATTERN = re.compile(r"javascript|\bspa\b|single page application", re.IGNORECASE)


@dataclass
class ToolDraft:
    """Editable form buffer for a new catalog entry."""

    website_url: str
    name: str = ""
    short_description: str = ""
    full_description: str = ""
    logo_url: str = ""
    features: list[str] = field(default_factory=lambda: [""])
    use_cases: list[str] = field(default_factory=lambda: [""])
    tags: list[str] = field(default_factory=lambda: [""])
    pricing: PricingTier = PricingTier.FREE
    source: SourceType = SourceType.CLOSED_SOURCE
    categories: list[str] = field(default_factory=list)

    @classmethod
    def from_record(
        cls,
        record: ExtractedToolRecord,
        website_url: str,
        categories: Sequence[ToolCategory] = (),
    ) -> "ToolDraft":
        return cls(
            website_url=website_url,
            name=record.name,
            short_description=record.description,
            full_description=record.description,
            logo_url=record.logo_url or "",
            features=list(record.features),
            use_cases=list(record.use_cases),
            tags=list(record.tags),
            pricing=record.pricing,
            source=SourceType.CLOSED_SOURCE,
            categories=[categories[0].id] if categories else [],
        )

    @classmethod
    def manual(cls, website_url: str) -> "ToolDraft":
        """An empty draft with a name guessed from the hostname."""
        return cls(website_url=website_url, name=suggest_name(website_url))


def suggest_name(url: str) -> str:
    """``https://www.jasper.ai/x`` → ``"Jasper"``; empty string if unparsable."""
    try:
        host = urlparse(url).hostname or ""
    except ValueError:
        return ""
    if host.startswith("www."):
        host = host[4:]
    label = host.split(".")[0] if host else ""
    return label[:1].upper() + label[1:]


def failure_message(error: Exception) -> str:
    """User-facing text for a failed extraction, always ending with the
    manual-entry hint."""
    message = f"AI extraction failed: {error}"
    if isinstance(error, LikelySPA) or _JS_PATTERN.search(str(error)):
        message = f"JavaScript-heavy website detected. {error}"
    return f"{message} {MANUAL_ENTRY_HINT}"


@dataclass
class AutofillResult:
    attempt: int
    draft: ToolDraft
    extracted: bool
    committed: bool
    message: str = ""


class AutofillSession:
    """Owns one form buffer and the ordinal of the latest extraction attempt."""

    def __init__(
        self,
        pipeline: ExtractionPipeline,
        categories: Sequence[ToolCategory] = (),
    ) -> None:
        self._pipeline = pipeline
        self._categories = list(categories)
        self._latest = 0
        self.draft: ToolDraft | None = None

    @property
    def latest_attempt(self) -> int:
        return self._latest

    def begin(self) -> int:
        """Start a new attempt and return its ordinal."""
        self._latest += 1
        return self._latest

    def commit(self, attempt: int, draft: ToolDraft) -> bool:
        """Store *draft* unless a newer attempt has started since *attempt*."""
        if attempt != self._latest:
            logger.info(f"[autofill] dropping stale attempt {attempt} (latest {self._latest})")
            return False
        self.draft = draft
        return True

    async def autofill(self, url: str) -> AutofillResult:
        """Extract *url* into a draft; on failure return a manual draft.

        Raises:
            InvalidInput: *url* is not an absolute http(s) URL.
        """
        target = validate_url(url)
        attempt = self.begin()
        try:
            record = await self._pipeline.extract(target)
        except (ExtractionFailed, StructuredDataError) as exc:
            logger.warning(f"[autofill] attempt {attempt} failed: {exc}")
            draft = ToolDraft.manual(target)
            committed = self.commit(attempt, draft)
            return AutofillResult(
                attempt=attempt,
                draft=draft,
                extracted=False,
                committed=committed,
                message=failure_message(exc),
            )

        draft = ToolDraft.from_record(record, target, self._categories)
        committed = self.commit(attempt, draft)
        return AutofillResult(
            attempt=attempt,
            draft=draft,
            extracted=True,
            committed=committed,
            message="Product data extracted and autofilled! Review and edit, then save.",
        )
