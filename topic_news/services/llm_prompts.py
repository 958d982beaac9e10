"""Prompt text for the map, reduce and feed-suggestion model calls."""

from __future__ import annotations

import json
from collections.abc import Sequence

from topic_news.models.news import ArticleInput, ArticleSummary

TRUNCATION_MARKER = "…[truncated]"

ARTICLE_SUMMARY_SYSTEM_PROMPT = (
    "You are a careful analyst. Extract verifiable facts from the article. "
    "Return the article's url and title exactly as given, a list of claims, and key facts. "
    "Only include a quote on a claim when it appears verbatim in the article content. "
    "Note the article's stance and any uncertainties it raises. Output JSON only."
)

SYNTHESIS_SYSTEM_PROMPT = (
    "You synthesize multiple news sources into one concise, accurate briefing. "
    "Write a headline, an optional dek, sectioned paragraphs, key takeaways, and where "
    "relevant a timeline, risks and open questions. Every fact must be traceable to at "
    "least one entry in sources, and sources may only use the article URLs provided. "
    "Avoid speculation. Output JSON only."
)

FEED_SUGGEST_SYSTEM_PROMPT = """You are an expert researcher who surfaces up-to-date, highly relevant RSS and Atom feeds for a topic.

Instructions:
- The user provides a topic query and a maximum number of feeds to return.
- Find current, active feeds that focus clearly on the topic.
- Prefer official feeds and https URLs.
- Each feed needs a title and an absolute feedUrl; siteUrl and description are optional.
- Return no more feeds than the limit. If nothing suitable exists, return an empty list."""


def truncate(text: str, limit: int) -> str:
    """Cut ``text`` to ``limit`` characters, appending a visible marker when cut."""
    if not text or len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


def build_article_prompt(article: ArticleInput, max_chars: int) -> str:
    return json.dumps(
        {
            "url": article.url,
            "title": article.title,
            "publishedAt": article.published_at,
            "content": truncate(article.content, max_chars),
            "schema": "ArticleSummary",
        },
        ensure_ascii=False,
    )


def build_synthesis_prompt(topic_id: str, summaries: Sequence[ArticleSummary]) -> str:
    return json.dumps(
        {
            "topicId": topic_id,
            "articles": [s.model_dump(by_alias=True, exclude_none=True) for s in summaries],
            "schema": "Synthesis",
        },
        ensure_ascii=False,
    )


def build_feed_suggest_prompt(query: str, limit: int, user_prompt: str | None = None) -> str:
    prompt = f"Query: {query}\nLimit: {limit}"
    if user_prompt:
        prompt += f"\n\nAdditional context to follow strictly:\n{user_prompt}"
    return prompt
