"""Outbound HTTP client for third-party feed hosts."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

from topic_news.core.settings import get_settings

FEED_ACCEPT_HEADER = (
    "application/rss+xml, application/atom+xml, application/xml, text/xml, */*;q=0.5"
)


def feed_request_headers() -> dict[str, str]:
    settings = get_settings()
    return {
        "Accept": FEED_ACCEPT_HEADER,
        "User-Agent": settings.http_user_agent,
    }


@asynccontextmanager
async def feed_http_client(
    timeout: float,
    client: httpx.AsyncClient | None = None,
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield an AsyncClient for feed requests.

    A caller-supplied client is reused as-is and left open; otherwise a
    short-lived client following redirects is created and closed on exit.
    """
    if client is not None:
        yield client
        return

    async with httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        follow_redirects=True,
        headers=feed_request_headers(),
    ) as owned_client:
        yield owned_client
