"""Request and response DTOs for the topic news API."""

from __future__ import annotations

from pydantic import Field, field_validator

from topic_news.models.jobs import JobStatus
from topic_news.models.news import Article, CamelModel, FeedCandidate, Synthesis


class NewsResponse(CamelModel):
    """Aggregated articles for a topic."""

    articles: list[Article] = Field(default_factory=list, description="Articles, newest first")


class SummarizeRequest(CamelModel):
    """Optional body for starting a synthesis job."""

    limit: int | None = Field(default=None, description="Max articles sent to the map phase")
    articles: list[Article] | None = Field(
        default=None, description="Already-fetched articles to reuse instead of aggregating"
    )


class SummarizeAcceptedResponse(CamelModel):
    job_id: str = Field(..., description="Opaque job identifier to poll")
    status: JobStatus = Field(default=JobStatus.QUEUED)


class JobStatusResponse(CamelModel):
    """Current state of a synthesis job."""

    job_id: str
    status: JobStatus
    result: Synthesis | None = None
    error: str | None = None


class SuggestFeedsRequest(CamelModel):
    query: str = Field(..., description="Topic to find feeds for")
    limit: int = Field(default=5, ge=1, le=20, description="Maximum feeds to propose")
    user_prompt: str | None = Field(default=None, description="Extra instructions for the model")

    @field_validator("query")
    @classmethod
    def _query_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("query is required")
        return value


class SuggestFeedsResponse(CamelModel):
    feeds: list[FeedCandidate] = Field(default_factory=list)
    model: str
