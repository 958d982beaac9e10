"""Fetch a single feed URL and return its normalized entries.

Every failure mode (network error, timeout, non-2xx, malformed XML) yields an
empty list so one bad feed never blocks aggregation of the others.
"""

from __future__ import annotations

import asyncio

import httpx

from topic_news.core.logging import get_logger
from topic_news.core.settings import get_settings
from topic_news.services.feed_parser import FeedEntry, FeedKind, FeedParseError, parse_feed_document
from topic_news.services.http import feed_http_client, feed_request_headers
from topic_news.utils.error_logger import log_http_error

logger = get_logger(__name__)

COMPONENT = "feed_fetcher"


async def fetch_feed_entries(
    feed_url: str,
    *,
    client: httpx.AsyncClient | None = None,
    timeout: float | None = None,
) -> list[FeedEntry]:
    """
    GET ``feed_url`` and parse it as RSS or Atom.

    Args:
        feed_url: Absolute feed URL.
        client: Optional shared client; a private one is created otherwise.
        timeout: Hard deadline for the whole request in seconds.

    Returns:
        Parsed entries, or an empty list on any failure.
    """
    deadline = timeout if timeout is not None else get_settings().news_fetch_timeout_seconds

    try:
        async with asyncio.timeout(deadline):
            async with feed_http_client(deadline, client) as http_client:
                response = await http_client.get(
                    feed_url, headers=feed_request_headers(), follow_redirects=True
                )
    except TimeoutError as exc:
        log_http_error(COMPONENT, feed_url, error=exc, operation="fetch_feed")
        return []
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        log_http_error(COMPONENT, feed_url, error=exc, operation="fetch_feed")
        return []

    if not response.is_success:
        log_http_error(COMPONENT, feed_url, response=response, operation="fetch_feed")
        return []

    try:
        parsed = parse_feed_document(response.content)
    except FeedParseError as exc:
        logger.warning(
            "Malformed feed XML from %s: %s",
            feed_url,
            exc,
            extra={
                "component": COMPONENT,
                "operation": "parse_feed",
                "context_data": {"feed_url": feed_url},
            },
        )
        return []

    if parsed.kind is FeedKind.UNRECOGNIZED:
        logger.info(
            "Response from %s is neither RSS nor Atom",
            feed_url,
            extra={"component": COMPONENT, "operation": "parse_feed"},
        )
        return []

    logger.debug(
        "Fetched %s entries from %s (%s)",
        len(parsed.entries),
        feed_url,
        parsed.kind.value,
        extra={"component": COMPONENT, "operation": "fetch_feed"},
    )
    return parsed.entries
