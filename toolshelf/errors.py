"""Error taxonomy shared by the extraction pipeline and the catalog layer.

Per-strategy fetch failures (:class:`FetchError` subclasses) are expected and
only make the orchestrator move on to the next strategy.  When every
strategy has failed the caller sees a single :class:`ExtractionFailed`.
Extractor-stage failures (:class:`StructuredDataError` subclasses) are raised
once a fetcher has already succeeded and are not retried.
"""

from __future__ import annotations


class ToolshelfError(Exception):
    """Base class for every error raised by toolshelf."""


class InvalidInput(ToolshelfError):
    """Malformed caller input (bad URL, unknown filter value)."""


# ---------------------------------------------------------------------------
# Fetch strategy failures
# ---------------------------------------------------------------------------

class FetchError(ToolshelfError):
    """A single fetch strategy could not produce usable content."""


class UpstreamError(FetchError):
    """The upstream service answered with a non-2xx status or broke down."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class HttpError(UpstreamError):
    """The target site itself answered with a non-2xx status."""

    def __init__(self, status: int, reason: str = "") -> None:
        message = f"HTTP {status}: {reason}" if reason else f"HTTP {status}"
        super().__init__(message, status=status)


class AuthError(FetchError):
    """The rendering service rejected (or was never given) credentials."""


class EmptyContent(FetchError):
    """The payload was empty or too short to be a real page."""


class NoContentExtracted(FetchError):
    """The readability service returned no main content field."""


class LikelySPA(FetchError):
    """Raw markup looks like an unrendered single-page application shell."""


class BlockedContent(FetchError):
    """The payload is a bot-wall, JS-required or rate-limit page."""


class ExtractionFailed(ToolshelfError):
    """Every fetch strategy failed; manual entry is the way forward."""

    def __init__(
        self,
        last_error: BaseException | None,
        attempts: list[tuple[str, str]] | None = None,
    ) -> None:
        reason = str(last_error) if last_error is not None else "Unknown error"
        super().__init__(
            f"All extraction methods failed. Last error: {reason}. "
            "You can still enter the tool details manually."
        )
        self.last_error = last_error
        self.attempts = attempts or []


# ---------------------------------------------------------------------------
# Structured-data extractor failures
# ---------------------------------------------------------------------------

class StructuredDataError(ToolshelfError):
    """The text-generation step could not produce a record."""


class ModelUnavailable(StructuredDataError):
    """No API credential, or the model endpoint refused / failed the call."""


class EmptyResponse(StructuredDataError):
    """The model returned no content."""


class MalformedResponse(StructuredDataError):
    """The model reply is not a JSON object of the expected shape."""

    def __init__(self, message: str, raw: str = "") -> None:
        super().__init__(message)
        self.raw = raw
