"""LLM-backed feed discovery for a topic."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, Path
from pydantic import ValidationError

from topic_news.core.deps import AuthenticatedUser, get_current_user
from topic_news.core.logging import get_logger
from topic_news.core.settings import get_settings
from topic_news.routers.api.models import SuggestFeedsRequest, SuggestFeedsResponse
from topic_news.services.feed_suggestions import (
    FeedSuggester,
    FeedSuggestionError,
    llm_suggest_feeds,
    suggest_topic_feeds,
)
from topic_news.services.llm_models import missing_llm_credentials
from topic_news.utils.error_logger import log_error

logger = get_logger(__name__)

router = APIRouter(prefix="/topics", tags=["topic-suggest"])


def get_feed_suggester() -> FeedSuggester:
    return llm_suggest_feeds


def _field_errors(exc: ValidationError) -> list[dict[str, str]]:
    return [
        {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
        for error in exc.errors()
    ]


@router.post("/{topic_id}/suggest", response_model=SuggestFeedsResponse, response_model_by_alias=True)
async def suggest_feeds(
    topic_id: Annotated[str, Path(..., description="Topic identifier")],
    payload: Annotated[dict[str, Any], Body()],
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    suggester: Annotated[FeedSuggester, Depends(get_feed_suggester)],
) -> SuggestFeedsResponse:
    """Propose feeds for ``query`` and return only those that validate."""
    try:
        request = SuggestFeedsRequest.model_validate(payload)
    except ValidationError as exc:
        raise HTTPException(
            status_code=400, detail={"error": "Invalid request", "fields": _field_errors(exc)}
        ) from None

    settings = get_settings()
    if missing_llm_credentials(settings.feed_suggest_model):
        raise HTTPException(status_code=500, detail="LLM API key not configured on server")

    try:
        result = await suggest_topic_feeds(
            request.query,
            limit=request.limit,
            user_prompt=request.user_prompt,
            suggester=suggester,
        )
    except FeedSuggestionError as exc:
        log_error(
            "topic_suggest_api",
            exc,
            operation="suggest_feeds",
            item_id=topic_id,
            context={"user_id": current_user.id, "query": request.query},
        )
        raise HTTPException(status_code=502, detail="Upstream model error") from None

    return SuggestFeedsResponse(feeds=result.feeds, model=result.model)
