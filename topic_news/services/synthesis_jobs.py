"""Detached processing of a synthesis job.

The request handler only creates the job; this coroutine runs afterwards as
a background task, owns every later transition, and never raises.
"""

from __future__ import annotations

from collections.abc import Sequence

from topic_news.core.logging import get_logger
from topic_news.models.news import Article, TopicFeed
from topic_news.services.job_store import JobStore
from topic_news.services.news_aggregator import aggregate_topic_news
from topic_news.services.news_summarizer import SummarizerDeps, summarize_topic
from topic_news.utils.error_logger import log_error

logger = get_logger(__name__)


async def run_synthesis_job(
    job_id: str,
    topic_id: str,
    *,
    store: JobStore,
    feeds: Sequence[TopicFeed] | None = None,
    articles: Sequence[Article] | None = None,
    max_articles: int | None = None,
    deps: SummarizerDeps | None = None,
) -> None:
    """
    Move a queued job to running, run the pipeline and record the outcome.

    Args:
        job_id: Job created by ``JobStore.create``.
        topic_id: Topic being summarized.
        store: Store holding the job.
        feeds: Topic feeds to aggregate when ``articles`` is not given.
        articles: Already-fetched articles to reuse instead of aggregating.
        max_articles: Cap on articles sent to the map phase.
        deps: Model calls for the summarizer.
    """
    store.start_processing(job_id)
    logger.info(
        "Processing synthesis job %s",
        job_id,
        extra={"component": "synthesis_jobs", "operation": "run", "item_id": job_id},
    )

    try:
        if articles is None:
            articles = await aggregate_topic_news(feeds or [])
        result = await summarize_topic(
            topic_id, list(articles), deps=deps, max_articles=max_articles
        )
    except Exception as exc:  # noqa: BLE001
        log_error(
            "synthesis_jobs",
            exc,
            operation="run_synthesis_job",
            item_id=job_id,
            context={"topic_id": topic_id},
        )
        store.fail(job_id, str(exc))
        return

    store.complete(job_id, result)
