"""Aggregate recent articles across all feeds of a topic."""

from __future__ import annotations

from collections.abc import Sequence

import httpx

from topic_news.core.logging import get_logger
from topic_news.core.settings import get_settings
from topic_news.models.news import Article, FeedRef, TopicFeed
from topic_news.services.feed_fetcher import fetch_feed_entries
from topic_news.services.feed_parser import FeedEntry
from topic_news.services.http import feed_http_client
from topic_news.services.worker_pool import run_bounded
from topic_news.utils.dates import EPOCH

logger = get_logger(__name__)

COMPONENT = "news_aggregator"

DEFAULT_ARTICLE_LIMIT = 50
MAX_ARTICLE_LIMIT = 200


def clamp_limit(limit: int | None) -> int:
    """Clamp a requested limit to ``[1, 200]``; missing or zero means the default."""
    if not limit:
        return DEFAULT_ARTICLE_LIMIT
    return max(1, min(MAX_ARTICLE_LIMIT, limit))


def article_from_entry(feed: TopicFeed, entry: FeedEntry) -> Article | None:
    """Build an Article, or None when the entry lacks a title or URL."""
    title = (entry.title or "").strip()
    url = (entry.link or "").strip()
    if not title or not url:
        return None

    identity = entry.published_at.isoformat() if entry.published_at else url
    return Article(
        id=f"{feed.id}:{identity}",
        title=title,
        url=url,
        published_at=entry.published_at,
        feed_ref=FeedRef(id=feed.id, name=feed.name),
        summary=entry.summary or entry.content or None,
    )


def sort_articles(articles: list[Article]) -> list[Article]:
    """Newest first; undated articles count as epoch; ties broken by title ascending."""
    return sorted(
        articles,
        key=lambda a: (-(a.published_at or EPOCH).timestamp(), a.title),
    )


async def aggregate_topic_news(
    feeds: Sequence[TopicFeed],
    *,
    limit: int | None = None,
    client: httpx.AsyncClient | None = None,
    concurrency: int | None = None,
) -> list[Article]:
    """
    Fetch every feed through the worker pool and merge the results.

    Args:
        feeds: Topic feeds; entries without a ``feed_url`` are skipped.
        limit: Maximum number of articles returned (clamped to [1, 200]).
        client: Optional shared HTTP client.
        concurrency: Worker pool size (defaults to settings, 5).

    Returns:
        Articles sorted newest-first, capped at ``limit``.
    """
    settings = get_settings()
    pool_size = concurrency if concurrency is not None else settings.news_fetch_concurrency
    fetchable = [feed for feed in feeds if feed.feed_url]

    async with feed_http_client(settings.news_fetch_timeout_seconds, client) as http_client:

        async def _fetch(feed: TopicFeed) -> list[Article]:
            entries = await fetch_feed_entries(feed.feed_url, client=http_client)
            return [a for a in (article_from_entry(feed, e) for e in entries) if a is not None]

        per_feed = await run_bounded(fetchable, _fetch, concurrency=pool_size, component=COMPONENT)

    merged = [article for articles in per_feed if articles for article in articles]
    ordered = sort_articles(merged)[: clamp_limit(limit)]

    logger.info(
        "Aggregated %s articles from %s feeds (returning %s)",
        len(merged),
        len(fetchable),
        len(ordered),
        extra={
            "component": COMPONENT,
            "operation": "aggregate",
            "context_data": {"feeds": len(fetchable), "articles": len(merged)},
        },
    )
    return ordered
