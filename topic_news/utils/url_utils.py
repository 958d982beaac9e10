"""URL helpers."""

from __future__ import annotations

from urllib.parse import urlparse


def is_http_url(value: str | None) -> bool:
    """Return True when value is an absolute http(s) URL."""
    if not value or not isinstance(value, str):
        return False
    try:
        parsed = urlparse(value.strip())
    except ValueError:
        return False
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)

