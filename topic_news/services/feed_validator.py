"""Network validation of candidate RSS/Atom feed URLs."""

from __future__ import annotations

import asyncio
import re
from collections.abc import Sequence

import httpx

from topic_news.core.logging import get_logger
from topic_news.core.settings import get_settings
from topic_news.models.news import FeedCandidate
from topic_news.services.feed_parser import FeedKind, FeedParseError, parse_feed_document
from topic_news.services.http import feed_http_client, feed_request_headers
from topic_news.services.worker_pool import run_bounded

logger = get_logger(__name__)

COMPONENT = "feed_validator"

FEED_CONTENT_TYPE_PATTERN = re.compile(
    r"(application/(rss|atom)\+xml|application/xml|text/xml)", re.IGNORECASE
)
HTML_TAG_PATTERN = re.compile(rb"<html[\s>]", re.IGNORECASE)


class ResponseTooLargeError(Exception):
    """Raised when a response body exceeds the read cap."""


async def read_with_cap(response: httpx.Response, max_bytes: int) -> bytes:
    """Read a streamed body chunk by chunk, aborting past ``max_bytes``."""
    chunks: list[bytes] = []
    received = 0
    async for chunk in response.aiter_bytes():
        received += len(chunk)
        if received > max_bytes:
            raise ResponseTooLargeError(f"response exceeded {max_bytes} bytes")
        chunks.append(chunk)
    return b"".join(chunks)


def is_valid_feed_document(body: bytes) -> bool:
    """True for RSS with a titled channel and items, or Atom with a titled feed and entries."""
    try:
        parsed = parse_feed_document(body)
    except FeedParseError:
        return False
    if parsed.kind is FeedKind.UNRECOGNIZED:
        return False
    return bool(parsed.title.strip()) and len(parsed.entries) > 0


async def _check_feed(
    feed_url: str, client: httpx.AsyncClient | None, deadline: float, max_bytes: int
) -> bool:
    async with asyncio.timeout(deadline):
        async with feed_http_client(deadline, client) as http_client:
            async with http_client.stream(
                "GET", feed_url, headers=feed_request_headers(), follow_redirects=True
            ) as response:
                if not response.is_success:
                    logger.debug("Feed %s returned HTTP %s", feed_url, response.status_code)
                    return False

                content_type = response.headers.get("content-type", "")
                body = await read_with_cap(response, max_bytes)

    # Guards against feed URLs that silently redirect to a web page
    if not FEED_CONTENT_TYPE_PATTERN.search(content_type) and HTML_TAG_PATTERN.search(body):
        logger.debug("Feed %s served an HTML document", feed_url)
        return False

    return is_valid_feed_document(body)


async def is_valid_feed(
    feed_url: str,
    *,
    client: httpx.AsyncClient | None = None,
    timeout: float | None = None,
    max_bytes: int | None = None,
) -> bool:
    """
    Decide whether ``feed_url`` serves a structurally valid, non-empty feed.

    Any failure (network, timeout, oversize body, parse error) is an
    invalid verdict; nothing propagates to the caller.
    """
    settings = get_settings()
    deadline = timeout if timeout is not None else settings.feed_validation_timeout_seconds
    cap = max_bytes if max_bytes is not None else settings.feed_validation_max_bytes

    try:
        valid = await _check_feed(feed_url, client, deadline, cap)
    except Exception as exc:  # noqa: BLE001
        logger.info(
            "Feed validation failed for %s: %s",
            feed_url,
            exc,
            extra={
                "component": COMPONENT,
                "operation": "validate_feed",
                "context_data": {"feed_url": feed_url, "error_type": type(exc).__name__},
            },
        )
        return False

    logger.debug(
        "Feed %s validated: %s",
        feed_url,
        valid,
        extra={"component": COMPONENT, "operation": "validate_feed"},
    )
    return valid


async def filter_valid_candidates(
    candidates: Sequence[FeedCandidate],
    *,
    client: httpx.AsyncClient | None = None,
    concurrency: int | None = None,
) -> list[FeedCandidate]:
    """Validate candidates through the worker pool and keep those that pass.

    The returned list preserves the input order of the surviving candidates.
    """
    settings = get_settings()
    limit = concurrency if concurrency is not None else settings.feed_validation_concurrency

    async def _validate(candidate: FeedCandidate) -> bool:
        return await is_valid_feed(candidate.feed_url, client=client)

    verdicts = await run_bounded(candidates, _validate, concurrency=limit, component=COMPONENT)
    valid = [candidate for candidate, ok in zip(candidates, verdicts) if ok]

    logger.info(
        "Validated %s/%s feed candidates",
        len(valid),
        len(candidates),
        extra={"component": COMPONENT, "operation": "filter_candidates"},
    )
    return valid
