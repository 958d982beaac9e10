"""LLM-proposed feed candidates, filtered through network validation."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx
from pydantic import Field, ValidationError

from topic_news.core.logging import get_logger
from topic_news.core.settings import get_settings
from topic_news.models.news import CamelModel, FeedCandidate
from topic_news.services.feed_validator import filter_valid_candidates
from topic_news.services.llm_agents import get_basic_agent
from topic_news.services.llm_prompts import FEED_SUGGEST_SYSTEM_PROMPT, build_feed_suggest_prompt

logger = get_logger(__name__)

COMPONENT = "feed_suggestions"


class SuggestedFeed(CamelModel):
    """Unvalidated feed proposal as returned by the model."""

    title: str = ""
    feed_url: str = ""
    site_url: str | None = None
    description: str | None = None


class FeedSuggestionBatch(CamelModel):
    feeds: list[SuggestedFeed] = Field(default_factory=list)


class FeedSuggestionError(Exception):
    """Raised when the suggestion model call fails."""


FeedSuggester = Callable[[str, int, str | None], Awaitable[FeedSuggestionBatch]]


async def llm_suggest_feeds(query: str, limit: int, user_prompt: str | None) -> FeedSuggestionBatch:
    settings = get_settings()
    agent = get_basic_agent(
        settings.feed_suggest_model,
        FeedSuggestionBatch,
        FEED_SUGGEST_SYSTEM_PROMPT,
        temperature=settings.llm_temperature,
    )
    result = await agent.run(build_feed_suggest_prompt(query, limit, user_prompt))
    return result.output


def normalize_suggestions(batch: FeedSuggestionBatch, limit: int) -> list[FeedCandidate]:
    """Turn raw proposals into FeedCandidates, skipping ones without a title or absolute URL."""
    candidates: list[FeedCandidate] = []
    for index, suggestion in enumerate(batch.feeds):
        try:
            candidates.append(FeedCandidate.model_validate(suggestion.model_dump()))
        except ValidationError as exc:
            logger.info(
                "Skipping invalid feed suggestion %s: %s",
                index,
                exc.errors()[0].get("msg") if exc.errors() else exc,
                extra={
                    "component": COMPONENT,
                    "operation": "normalize",
                    "context_data": {"feed_url": suggestion.feed_url},
                },
            )
        if len(candidates) >= limit:
            break
    return candidates


@dataclass
class FeedSuggestionResult:
    feeds: list[FeedCandidate]
    model: str


async def suggest_topic_feeds(
    query: str,
    *,
    limit: int = 5,
    user_prompt: str | None = None,
    suggester: FeedSuggester | None = None,
    client: httpx.AsyncClient | None = None,
) -> FeedSuggestionResult:
    """
    Ask the model for feeds matching ``query`` and keep those that validate.

    Raises:
        FeedSuggestionError: The model call failed.
    """
    settings = get_settings()
    suggester = suggester or llm_suggest_feeds

    try:
        batch = await suggester(query, limit, user_prompt)
    except Exception as exc:
        raise FeedSuggestionError(str(exc)) from exc

    candidates = normalize_suggestions(batch, limit)
    valid = await filter_valid_candidates(candidates, client=client)

    logger.info(
        "Feed suggestion for %r: %s proposed, %s well-formed, %s valid",
        query,
        len(batch.feeds),
        len(candidates),
        len(valid),
        extra={"component": COMPONENT, "operation": "suggest"},
    )
    return FeedSuggestionResult(feeds=valid, model=settings.feed_suggest_model)
