"""Topic news aggregation and synthesis job endpoints."""

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Body, Depends, HTTPException, Path, Query, status
from sqlalchemy.orm import Session

from topic_news.core.db import get_db_session
from topic_news.core.deps import AuthenticatedUser, get_current_user
from topic_news.core.logging import get_logger
from topic_news.core.settings import get_settings
from topic_news.models.news import TopicFeed
from topic_news.repositories.topic_feeds import list_topic_feeds
from topic_news.routers.api.models import (
    JobStatusResponse,
    NewsResponse,
    SummarizeAcceptedResponse,
    SummarizeRequest,
)
from topic_news.services.job_store import (
    JobAccessDeniedError,
    JobNotFoundError,
    JobStore,
    get_job_store,
)
from topic_news.services.llm_models import missing_llm_credentials
from topic_news.services.news_aggregator import aggregate_topic_news, clamp_limit
from topic_news.services.news_summarizer import SummarizerDeps
from topic_news.services.synthesis_jobs import run_synthesis_job
from topic_news.utils.error_logger import log_error

logger = get_logger(__name__)

router = APIRouter(prefix="/topics", tags=["topic-news"])


def get_summarizer_deps() -> SummarizerDeps:
    """Model calls used by synthesis jobs; overridden in tests."""
    return SummarizerDeps()


def _require_topic_id(topic_id: str) -> str:
    topic_id = topic_id.strip()
    if not topic_id:
        raise HTTPException(status_code=400, detail="Missing topicId")
    return topic_id


def _parse_limit(raw: str | None) -> int | None:
    """Parse ``limit``; anything non-numeric means the default."""
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


def _load_feeds(db: Session, user_id: str, topic_id: str) -> list[TopicFeed]:
    try:
        return list_topic_feeds(db, user_id, topic_id)
    except Exception as exc:
        log_error(
            "topic_news_api",
            exc,
            operation="list_topic_feeds",
            item_id=topic_id,
            context={"user_id": user_id},
        )
        raise HTTPException(status_code=500, detail="Failed to load feeds") from None


@router.get("/{topic_id}/news", response_model=NewsResponse, response_model_by_alias=True)
async def get_topic_news(
    topic_id: Annotated[str, Path(..., description="Topic identifier")],
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db_session)],
    limit: Annotated[str | None, Query(description="Max articles (1-200, default 50)")] = None,
) -> NewsResponse:
    """Fetch every feed of the topic and return the merged, newest-first articles."""
    topic_id = _require_topic_id(topic_id)
    feeds = _load_feeds(db, current_user.id, topic_id)
    articles = await aggregate_topic_news(feeds, limit=clamp_limit(_parse_limit(limit)))
    return NewsResponse(articles=articles)


@router.post(
    "/{topic_id}/news/summarize",
    response_model=SummarizeAcceptedResponse,
    response_model_by_alias=True,
    status_code=status.HTTP_202_ACCEPTED,
)
async def start_topic_summary(
    topic_id: Annotated[str, Path(..., description="Topic identifier")],
    background_tasks: BackgroundTasks,
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db_session)],
    store: Annotated[JobStore, Depends(get_job_store)],
    deps: Annotated[SummarizerDeps, Depends(get_summarizer_deps)],
    request: Annotated[SummarizeRequest | None, Body()] = None,
) -> SummarizeAcceptedResponse:
    """
    Queue a map-reduce synthesis job for the topic.

    The job runs after the response is sent; poll the GET variant with the
    returned ``jobId``.
    """
    topic_id = _require_topic_id(topic_id)
    settings = get_settings()

    missing = missing_llm_credentials(settings.news_map_model, settings.news_reduce_model)
    if missing:
        logger.error("LLM credentials missing for providers: %s", ", ".join(missing))
        raise HTTPException(status_code=500, detail="LLM API key not configured on server")

    request = request or SummarizeRequest()
    cap = settings.summarize_max_articles
    max_articles = cap if request.limit is None else max(1, min(request.limit, cap))

    feeds: list[TopicFeed] | None = None
    if request.articles is None:
        feeds = _load_feeds(db, current_user.id, topic_id)

    job_id = store.create(topic_id, current_user.id)
    background_tasks.add_task(
        run_synthesis_job,
        job_id,
        topic_id,
        store=store,
        feeds=feeds,
        articles=request.articles,
        max_articles=max_articles,
        deps=deps,
    )
    return SummarizeAcceptedResponse(job_id=job_id)


@router.get(
    "/{topic_id}/news/summarize",
    response_model=JobStatusResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def get_topic_summary_status(
    topic_id: Annotated[str, Path(..., description="Topic identifier")],
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    store: Annotated[JobStore, Depends(get_job_store)],
    job_id: Annotated[str | None, Query(alias="jobId")] = None,
) -> JobStatusResponse:
    """Poll a synthesis job started by the caller."""
    if not job_id:
        raise HTTPException(status_code=400, detail="Missing jobId")

    try:
        job = store.get(job_id, current_user.id)
    except JobNotFoundError:
        raise HTTPException(status_code=404, detail="Job not found") from None
    except JobAccessDeniedError:
        raise HTTPException(status_code=403, detail="Not authorized to access this job") from None

    if job.topic_id != topic_id.strip():
        raise HTTPException(status_code=404, detail="Job not found")

    return JobStatusResponse(job_id=job.id, status=job.status, result=job.result, error=job.error)
