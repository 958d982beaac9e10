"""Date parsing utilities with timezone normalization."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime, tzinfo

from dateutil import parser as date_parser
from dateutil import tz

TZ_ALIASES: Mapping[str, tzinfo | None] = {
    "EST": tz.gettz("America/New_York"),
    "EDT": tz.gettz("America/New_York"),
    "CST": tz.gettz("America/Chicago"),
    "CDT": tz.gettz("America/Chicago"),
    "MST": tz.gettz("America/Denver"),
    "MDT": tz.gettz("America/Denver"),
    "PST": tz.gettz("America/Los_Angeles"),
    "PDT": tz.gettz("America/Los_Angeles"),
    "UTC": UTC,
    "GMT": UTC,
}

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def parse_date_with_tz(value: str | datetime | None, default_tz: tzinfo = UTC) -> datetime | None:
    """Parse a feed timestamp into a timezone-aware UTC datetime.

    Args:
        value: Date string (RFC 822, ISO 8601, ...) or datetime instance.
        default_tz: Applied when the parsed datetime is naive.

    Returns:
        A UTC datetime, or None when the value is empty or unparseable.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if not text:
            return None
        try:
            parsed = date_parser.parse(text, tzinfos=TZ_ALIASES)
        except (ValueError, TypeError, OverflowError, date_parser.ParserError):
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=default_tz)
    return parsed.astimezone(UTC)


def utcnow() -> datetime:
    return datetime.now(UTC)
