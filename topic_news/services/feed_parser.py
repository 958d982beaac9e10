"""RSS/Atom document parsing into a tagged result.

The document kind is decided once per parse from feedparser's detected
version, and entries are normalized at this boundary so downstream code
never inspects feedparser structures.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

import feedparser

from topic_news.utils.dates import parse_date_with_tz

# Bozo conditions that do not make the XML itself malformed
BENIGN_BOZO_EXCEPTIONS = tuple(
    exc
    for exc in (
        getattr(feedparser, "CharacterEncodingOverride", None),
        getattr(getattr(feedparser, "exceptions", None), "CharacterEncodingOverride", None),
        getattr(feedparser, "NonXMLContentType", None),
        getattr(getattr(feedparser, "exceptions", None), "NonXMLContentType", None),
    )
    if isinstance(exc, type)
)


class FeedParseError(Exception):
    """Raised when a document is not well-formed XML."""


class FeedKind(str, Enum):
    RSS = "rss"
    ATOM = "atom"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class FeedEntry:
    """One RSS item or Atom entry."""

    title: str
    link: str
    published_at: datetime | None = None
    summary: str | None = None
    content: str | None = None


@dataclass(frozen=True)
class ParsedFeed:
    kind: FeedKind
    title: str = ""
    entries: list[FeedEntry] = field(default_factory=list)


def _text(value: Any) -> str | None:
    """Unwrap plain strings or ``{"value": ...}``-shaped nodes."""
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        inner = value.get("value")
        return inner if isinstance(inner, str) else None
    return None


def _first_content(entry: Any) -> str | None:
    contents = entry.get("content")
    if isinstance(contents, list):
        for node in contents:
            text = _text(node)
            if text:
                return text
        return None
    return _text(contents)


def _atom_link(entry: Any) -> str:
    links = entry.get("links")
    if isinstance(links, list) and links:
        for link in links:
            if isinstance(link, dict) and link.get("rel") == "alternate" and link.get("href"):
                return str(link["href"])
        first = links[0]
        if isinstance(first, dict) and first.get("href"):
            return str(first["href"])
    link = entry.get("link")
    return link if isinstance(link, str) else ""


def _rss_entry(entry: Any) -> FeedEntry:
    link = entry.get("link")
    return FeedEntry(
        title=entry.get("title") or "",
        link=link if isinstance(link, str) else "",
        # dc:date is surfaced by feedparser as "updated"
        published_at=parse_date_with_tz(entry.get("published") or entry.get("updated")),
        summary=_text(entry.get("summary")),
        content=_first_content(entry),
    )


def _atom_entry(entry: Any) -> FeedEntry:
    return FeedEntry(
        title=entry.get("title") or "",
        link=_atom_link(entry),
        published_at=parse_date_with_tz(entry.get("published") or entry.get("updated")),
        summary=_text(entry.get("summary")),
        content=_first_content(entry),
    )


def detect_kind(version: str | None) -> FeedKind:
    if not version:
        return FeedKind.UNRECOGNIZED
    if version.startswith("rss"):
        return FeedKind.RSS
    if version.startswith("atom"):
        return FeedKind.ATOM
    return FeedKind.UNRECOGNIZED


def parse_feed_document(body: bytes) -> ParsedFeed:
    """Parse raw feed bytes without schema validation.

    Args:
        body: Response body. Always bytes: feedparser treats a ``str`` that
            looks like a URL as something to fetch.

    Returns:
        ParsedFeed tagged RSS, ATOM or UNRECOGNIZED. Entries are only
        populated for RSS and Atom documents.

    Raises:
        FeedParseError: The body is not well-formed XML.
    """
    parsed = feedparser.parse(body)

    if parsed.get("bozo"):
        exc = parsed.get("bozo_exception")
        if not (BENIGN_BOZO_EXCEPTIONS and isinstance(exc, BENIGN_BOZO_EXCEPTIONS)):
            raise FeedParseError(str(exc) if exc else "malformed feed document")

    kind = detect_kind(parsed.get("version"))
    if kind is FeedKind.UNRECOGNIZED:
        return ParsedFeed(kind=kind)

    feed_meta = parsed.get("feed") or {}
    title = feed_meta.get("title") or ""
    to_entry = _rss_entry if kind is FeedKind.RSS else _atom_entry
    entries = [to_entry(entry) for entry in parsed.get("entries") or []]
    return ParsedFeed(kind=kind, title=title, entries=entries)
