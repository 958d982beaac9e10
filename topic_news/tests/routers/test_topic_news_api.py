"""Tests for the topic news and synthesis job endpoints."""

from functools import partial

import httpx
import pytest
from fastapi.testclient import TestClient

from topic_news.main import app
from topic_news.routers.api import topic_news as topic_news_router
from topic_news.routers.api.topic_news import get_summarizer_deps
from topic_news.services.news_aggregator import aggregate_topic_news
from topic_news.services.news_summarizer import SummarizerDeps
from topic_news.tests.feed_samples import three_day_rss


@pytest.fixture
def mocked_feeds(monkeypatch):
    """Route outbound feed requests: live.test serves RSS, everything else is unreachable."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "live.test":
            return httpx.Response(200, content=three_day_rss())
        raise httpx.ConnectError("unreachable", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    monkeypatch.setattr(
        topic_news_router, "aggregate_topic_news", partial(aggregate_topic_news, client=client)
    )
    return client


def test_news_requires_auth(client: TestClient, topic_with_feeds) -> None:
    response = client.get("/topics/topic-1/news")

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_news_returns_live_feed_articles_newest_first(
    client: TestClient, auth_headers, topic_with_feeds, mocked_feeds
) -> None:
    response = client.get("/topics/topic-1/news", headers=auth_headers)

    assert response.status_code == 200
    articles = response.json()["articles"]
    assert len(articles) == 3
    assert [a["title"] for a in articles] == ["Today", "Yesterday", "Two days ago"]
    assert articles[0]["feedRef"] == {"id": "feed-live", "name": "Live"}
    assert "publishedAt" in articles[0]
    assert articles[0]["id"].startswith("feed-live:")


def test_news_limit_is_applied(
    client: TestClient, auth_headers, topic_with_feeds, mocked_feeds
) -> None:
    response = client.get("/topics/topic-1/news", params={"limit": 1}, headers=auth_headers)

    assert response.status_code == 200
    assert [a["title"] for a in response.json()["articles"]] == ["Today"]


def test_news_for_foreign_topic_is_empty(
    client: TestClient, other_auth_headers, topic_with_feeds, mocked_feeds
) -> None:
    response = client.get("/topics/topic-1/news", headers=other_auth_headers)

    assert response.status_code == 200
    assert response.json() == {"articles": []}


def test_news_feed_listing_failure_is_500(
    client: TestClient, auth_headers, monkeypatch
) -> None:
    def broken_listing(db, user_id, topic_id):
        raise RuntimeError("database down")

    monkeypatch.setattr(topic_news_router, "list_topic_feeds", broken_listing)

    response = client.get("/topics/topic-1/news", headers=auth_headers)

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to load feeds"


def test_blank_topic_id_is_400(client: TestClient, auth_headers) -> None:
    response = client.get("/topics/%20/news", headers=auth_headers)

    assert response.status_code == 400


def test_summarize_without_feeds_queues_then_errors(
    client: TestClient, auth_headers, empty_topic
) -> None:
    response = client.post("/topics/topic-empty/news/summarize", headers=auth_headers)

    assert response.status_code == 202
    body = response.json()
    assert body["status"] == "queued"
    job_id = body["jobId"]

    poll = client.get(
        "/topics/topic-empty/news/summarize", params={"jobId": job_id}, headers=auth_headers
    )

    assert poll.status_code == 200
    assert poll.json() == {"jobId": job_id, "status": "error", "error": "no summaries produced"}


def test_summarize_with_supplied_articles_completes(
    client: TestClient, auth_headers, empty_topic
) -> None:
    async def summarize_article(article):
        return {"url": article.url, "title": article.title, "keyFacts": ["fact"]}

    async def synthesize(topic_id, summaries):
        return {
            "summary": {"headline": "Briefing", "sections": [], "keyTakeaways": ["k"]},
            "sources": [{"url": s.url, "title": s.title} for s in summaries],
        }

    app.dependency_overrides[get_summarizer_deps] = lambda: SummarizerDeps(
        summarize_article=summarize_article, synthesize=synthesize
    )
    articles = [
        {"id": f"f:{i}", "title": f"Story {i}", "url": f"https://news.test/{i}", "feedRef": {"id": "f"}}
        for i in range(3)
    ]

    response = client.post(
        "/topics/topic-empty/news/summarize",
        json={"limit": 2, "articles": articles},
        headers=auth_headers,
    )
    job_id = response.json()["jobId"]
    poll = client.get(
        "/topics/topic-empty/news/summarize", params={"jobId": job_id}, headers=auth_headers
    ).json()

    assert poll["status"] == "done"
    assert poll["result"]["topicId"] == "topic-empty"
    assert poll["result"]["summary"]["headline"] == "Briefing"
    assert [s["url"] for s in poll["result"]["sources"]] == [
        "https://news.test/0",
        "https://news.test/1",
    ]
    assert "generatedAt" in poll["result"]


def test_summarize_requires_llm_credentials(
    client: TestClient, auth_headers, empty_topic, settings, monkeypatch
) -> None:
    monkeypatch.setattr(settings, "openai_api_key", None)

    response = client.post("/topics/topic-empty/news/summarize", headers=auth_headers)

    assert response.status_code == 500
    assert response.json()["detail"] == "LLM API key not configured on server"


def test_summarize_requires_auth(client: TestClient, empty_topic) -> None:
    assert client.post("/topics/topic-empty/news/summarize").status_code == 401


def test_poll_missing_job_id_is_400(client: TestClient, auth_headers) -> None:
    response = client.get("/topics/topic-1/news/summarize", headers=auth_headers)
    assert response.status_code == 400


def test_poll_unknown_job_is_404(client: TestClient, auth_headers) -> None:
    response = client.get(
        "/topics/topic-1/news/summarize", params={"jobId": "nope"}, headers=auth_headers
    )
    assert response.status_code == 404


def test_poll_other_users_job_is_403(
    client: TestClient, auth_headers, other_auth_headers, job_store
) -> None:
    job_id = job_store.create("topic-1", "user-1")

    response = client.get(
        "/topics/topic-1/news/summarize", params={"jobId": job_id}, headers=other_auth_headers
    )

    assert response.status_code == 403


def test_poll_queued_job(client: TestClient, auth_headers, job_store) -> None:
    job_id = job_store.create("topic-1", "user-1")

    response = client.get(
        "/topics/topic-1/news/summarize", params={"jobId": job_id}, headers=auth_headers
    )

    assert response.json() == {"jobId": job_id, "status": "queued"}


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "Topic News"}
    assert "x-response-time" in response.headers


def test_poll_under_another_topic_is_404(client: TestClient, auth_headers, job_store) -> None:
    job_id = job_store.create("topic-1", "user-1")

    response = client.get(
        "/topics/topic-2/news/summarize", params={"jobId": job_id}, headers=auth_headers
    )

    assert response.status_code == 404


@pytest.mark.parametrize("raw_limit", ["abc", "", "1.5"])
def test_non_numeric_limit_uses_default(
    client: TestClient, auth_headers, topic_with_feeds, mocked_feeds, raw_limit
) -> None:
    response = client.get("/topics/topic-1/news", params={"limit": raw_limit}, headers=auth_headers)

    assert response.status_code == 200
    assert len(response.json()["articles"]) == 3
