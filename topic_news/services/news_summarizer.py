"""Map-reduce synthesis of a topic's articles into one cited briefing.

Map: each article gets a structured extraction call, run through the worker
pool; a failing article is logged and dropped. Reduce: one call over every
surviving summary produces the ``Synthesis``.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from topic_news.core.logging import get_logger
from topic_news.core.settings import get_settings
from topic_news.models.news import (
    Article,
    ArticleInput,
    ArticleSummary,
    SourceRef,
    Synthesis,
    SynthesisDraft,
)
from topic_news.services.llm_agents import get_basic_agent
from topic_news.services.llm_prompts import (
    ARTICLE_SUMMARY_SYSTEM_PROMPT,
    SYNTHESIS_SYSTEM_PROMPT,
    build_article_prompt,
    build_synthesis_prompt,
)
from topic_news.services.worker_pool import run_bounded
from topic_news.utils.dates import utcnow
from topic_news.utils.error_logger import log_processing_error
from topic_news.utils.url_utils import is_http_url

logger = get_logger(__name__)

COMPONENT = "news_summarizer"
NO_SUMMARIES_MESSAGE = "no summaries produced"

ArticleSummarizer = Callable[[ArticleInput], Awaitable[ArticleSummary | dict[str, Any]]]
BriefingSynthesizer = Callable[
    [str, Sequence[ArticleSummary]], Awaitable[SynthesisDraft | dict[str, Any]]
]


class NoSummariesProducedError(Exception):
    """Raised when every article failed the map phase."""

    def __init__(self, message: str = NO_SUMMARIES_MESSAGE):
        super().__init__(message)


class SynthesisError(Exception):
    """Raised when the reduce phase returns a malformed synthesis."""


async def llm_summarize_article(article: ArticleInput) -> ArticleSummary:
    """Structured extraction for one article via the map model."""
    settings = get_settings()
    agent = get_basic_agent(
        settings.news_map_model,
        ArticleSummary,
        ARTICLE_SUMMARY_SYSTEM_PROMPT,
        temperature=settings.llm_temperature,
    )
    result = await agent.run(build_article_prompt(article, settings.summarize_max_content_chars))
    return result.output


async def llm_synthesize(topic_id: str, summaries: Sequence[ArticleSummary]) -> SynthesisDraft:
    """Single reduce call over all surviving summaries."""
    settings = get_settings()
    agent = get_basic_agent(
        settings.news_reduce_model,
        SynthesisDraft,
        SYNTHESIS_SYSTEM_PROMPT,
        temperature=settings.llm_temperature,
    )
    result = await agent.run(build_synthesis_prompt(topic_id, summaries))
    return result.output


@dataclass
class SummarizerDeps:
    """Model calls used by the pipeline; swapped for stubs in tests."""

    summarize_article: ArticleSummarizer = llm_summarize_article
    synthesize: BriefingSynthesizer = llm_synthesize


async def map_articles(
    inputs: Sequence[ArticleInput],
    deps: SummarizerDeps,
    *,
    concurrency: int | None = None,
) -> list[ArticleSummary]:
    """Run the map phase; failed articles are dropped, completion order is irrelevant."""
    limit = concurrency if concurrency is not None else get_settings().summarize_concurrency

    async def _summarize(article: ArticleInput) -> ArticleSummary | None:
        try:
            raw = await deps.summarize_article(article)
            return ArticleSummary.model_validate(raw)
        except Exception as exc:  # noqa: BLE001
            log_processing_error(
                COMPONENT,
                item_id=article.id,
                error=exc,
                operation="map_article",
                context={"url": article.url},
                level=logging.WARNING,
            )
            return None

    results = await run_bounded(inputs, _summarize, concurrency=limit, component=COMPONENT)
    summaries = [summary for summary in results if summary is not None]
    logger.info(
        "Map phase produced %s/%s summaries",
        len(summaries),
        len(inputs),
        extra={"component": COMPONENT, "operation": "map"},
    )
    return summaries


def _clean_sources(sources: Sequence[SourceRef]) -> list[SourceRef]:
    seen: set[str] = set()
    cleaned: list[SourceRef] = []
    for source in sources:
        url = source.url.strip()
        if not is_http_url(url) or url in seen:
            continue
        seen.add(url)
        cleaned.append(SourceRef(url=url, title=source.title.strip()))
    return cleaned


async def reduce_summaries(
    topic_id: str,
    summaries: Sequence[ArticleSummary],
    deps: SummarizerDeps,
) -> Synthesis:
    """Run the reduce phase and shape-check its output.

    Raises:
        NoSummariesProducedError: ``summaries`` is empty.
        SynthesisError: The response lacks a valid ``summary`` or ``sources``.
    """
    if not summaries:
        raise NoSummariesProducedError()

    raw = await deps.synthesize(topic_id, summaries)
    try:
        draft = SynthesisDraft.model_validate(raw)
    except ValidationError as exc:
        raise SynthesisError(f"invalid synthesis shape: {exc.error_count()} errors") from exc

    return Synthesis(
        topic_id=topic_id,
        generated_at=utcnow(),
        summary=draft.summary,
        sources=_clean_sources(draft.sources),
    )


async def summarize_topic(
    topic_id: str,
    articles: Sequence[Article],
    *,
    deps: SummarizerDeps | None = None,
    max_articles: int | None = None,
) -> Synthesis:
    """
    Produce a cited briefing from up to ``max_articles`` articles.

    Args:
        topic_id: Topic the briefing is for.
        articles: Candidate articles, most relevant first.
        deps: Model calls; defaults to the configured LLM agents.
        max_articles: Cap on articles sent to the map phase (default 12).

    Raises:
        NoSummariesProducedError: Every map call failed or there were no articles.
        SynthesisError: The reduce output was malformed.
    """
    settings = get_settings()
    deps = deps or SummarizerDeps()
    cap = max_articles if max_articles is not None else settings.summarize_max_articles

    inputs = [ArticleInput.from_article(article) for article in articles[:cap]]
    summaries = await map_articles(inputs, deps)
    if not summaries:
        raise NoSummariesProducedError()

    synthesis = await reduce_summaries(topic_id, summaries, deps)
    logger.info(
        "Synthesized briefing for topic %s from %s summaries with %s sources",
        topic_id,
        len(summaries),
        len(synthesis.sources),
        extra={"component": COMPONENT, "operation": "reduce", "item_id": topic_id},
    )
    return synthesis
