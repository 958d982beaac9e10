"""Tests for multi-feed aggregation."""

from datetime import UTC, datetime, timedelta

import httpx
import pytest

from topic_news.models.news import Article, FeedRef, TopicFeed
from topic_news.services.feed_parser import FeedEntry
from topic_news.services.news_aggregator import (
    aggregate_topic_news,
    article_from_entry,
    clamp_limit,
    sort_articles,
)
from topic_news.tests.feed_samples import rss_document, three_day_rss

FEED = TopicFeed(id="feed-1", name="Live", feed_url="https://live.test/rss")


def _article(title: str, published_at: datetime | None) -> Article:
    return Article(
        id=f"feed-1:{title}",
        title=title,
        url=f"https://live.test/{title}",
        published_at=published_at,
        feed_ref=FeedRef(id="feed-1"),
    )


@pytest.mark.parametrize(
    ("requested", "expected"),
    [(None, 50), (0, 50), (-3, 1), (1, 1), (75, 75), (500, 200)],
)
def test_clamp_limit(requested, expected):
    assert clamp_limit(requested) == expected


def test_article_identity_uses_timestamp_then_url():
    published = datetime(2025, 6, 10, 9, 30, tzinfo=UTC)
    dated = article_from_entry(FEED, FeedEntry(title="A", link="https://x.test/a", published_at=published))
    undated = article_from_entry(FEED, FeedEntry(title="B", link="https://x.test/b"))

    assert dated.id == "feed-1:2025-06-10T09:30:00+00:00"
    assert undated.id == "feed-1:https://x.test/b"
    assert dated.feed_ref == FeedRef(id="feed-1", name="Live")


def test_article_summary_falls_back_to_content():
    article = article_from_entry(
        FEED, FeedEntry(title="A", link="https://x.test/a", summary=None, content="body")
    )
    assert article.summary == "body"


@pytest.mark.parametrize(
    "entry",
    [
        FeedEntry(title="", link="https://x.test/a"),
        FeedEntry(title="   ", link="https://x.test/a"),
        FeedEntry(title="No link", link=""),
    ],
)
def test_entries_without_title_or_link_are_dropped(entry):
    assert article_from_entry(FEED, entry) is None


def test_sort_newest_first_with_title_tiebreak_and_undated_last():
    noon = datetime(2025, 6, 10, 12, tzinfo=UTC)
    articles = [
        _article("undated", None),
        _article("beta", noon),
        _article("older", noon - timedelta(days=1)),
        _article("alpha", noon),
    ]

    ordered = sort_articles(articles)

    assert [a.title for a in ordered] == ["alpha", "beta", "older", "undated"]
    for first, second in zip(ordered, ordered[1:]):
        first_ts = first.published_at or datetime(1970, 1, 1, tzinfo=UTC)
        second_ts = second.published_at or datetime(1970, 1, 1, tzinfo=UTC)
        assert first_ts > second_ts or (first_ts == second_ts and first.title <= second.title)


@pytest.mark.asyncio
async def test_live_and_unreachable_feeds_merge_to_live_articles():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "live.test":
            return httpx.Response(200, content=three_day_rss())
        raise httpx.ConnectError("unreachable", request=request)

    feeds = [
        FEED,
        TopicFeed(id="feed-2", name="Down", feed_url="https://down.test/rss"),
        TopicFeed(id="feed-3", name="No URL", feed_url=None),
    ]

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        articles = await aggregate_topic_news(feeds, client=client)

    assert [a.title for a in articles] == ["Today", "Yesterday", "Two days ago"]
    assert {a.feed_ref.id for a in articles} == {"feed-1"}


@pytest.mark.asyncio
async def test_limit_caps_result_after_sorting():
    now = datetime.now(UTC)
    body = rss_document(
        items=[
            (f"Item {i}", f"https://live.test/{i}", (now - timedelta(hours=i)).strftime("%a, %d %b %Y %H:%M:%S GMT"))
            for i in range(5)
        ]
    )

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=body)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        articles = await aggregate_topic_news([FEED], limit=2, client=client)

    assert [a.title for a in articles] == ["Item 0", "Item 1"]


@pytest.mark.asyncio
async def test_no_feeds_returns_empty():
    assert await aggregate_topic_news([]) == []
