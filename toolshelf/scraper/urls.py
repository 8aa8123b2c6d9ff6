"""URL validation and resolution helpers."""

from __future__ import annotations

from urllib.parse import urljoin, urlparse

from toolshelf.errors import InvalidInput

_ALLOWED_SCHEMES = ("http", "https")


def validate_url(url: str) -> str:
    """Return *url* stripped, or raise :class:`InvalidInput` if it is not an
    absolute ``http``/``https`` URL with a host."""
    if not isinstance(url, str) or not url.strip():
        raise InvalidInput("URL is required.")
    candidate = url.strip()
    try:
        parsed = urlparse(candidate)
        hostname = parsed.hostname
        parsed.port  # raises on a non-numeric or out-of-range port
    except ValueError as exc:
        raise InvalidInput(f"Malformed URL {url!r}: {exc}") from exc
    if parsed.scheme.lower() not in _ALLOWED_SCHEMES or not parsed.netloc:
        raise InvalidInput(f"Not an absolute http(s) URL: {url!r}")
    if not hostname:
        raise InvalidInput(f"URL has no host: {url!r}")
    return candidate


def resolve_url(candidate: str | None, base: str) -> str | None:
    """Resolve *candidate* against *base* and return an absolute http(s) URL.

    Returns ``None`` for blanks, ``data:``/``javascript:`` references, and
    anything that does not end up as an http(s) URL with a host.
    """
    if not candidate or not candidate.strip():
        return None
    value = candidate.strip()
    try:
        resolved = urljoin(base, value)
        parsed = urlparse(resolved)
    except ValueError:
        return None
    if parsed.scheme.lower() not in _ALLOWED_SCHEMES or not parsed.netloc:
        return None
    return resolved


def site_origin(url: str) -> str:
    """Return ``scheme://host[:port]`` for *url*, without any userinfo."""
    parsed = urlparse(url)
    host = parsed.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    port = f":{parsed.port}" if parsed.port is not None else ""
    return f"{parsed.scheme}://{host}{port}"
