"""Pydantic models for topic news aggregation and synthesis."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from topic_news.utils.url_utils import is_http_url


class CamelModel(BaseModel):
    """Base model exposing camelCase field names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TopicFeed(CamelModel):
    """A feed attached to a topic, as listed by the topic/feed store."""

    id: str
    name: str | None = None
    feed_url: str | None = None


class FeedRef(CamelModel):
    id: str
    name: str | None = None


class Article(CamelModel):
    """Normalized article produced by aggregation. Never persisted."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    title: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    published_at: datetime | None = None
    feed_ref: FeedRef
    summary: str | None = None


class FeedCandidate(CamelModel):
    """A proposed feed awaiting network validation."""

    title: str
    feed_url: str
    site_url: str | None = None
    description: str | None = None

    @field_validator("title")
    @classmethod
    def _title_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title is required")
        return value

    @field_validator("feed_url")
    @classmethod
    def _feed_url_absolute(cls, value: str) -> str:
        value = value.strip()
        if not is_http_url(value):
            raise ValueError("feedUrl must be an absolute http(s) URL")
        return value

    @field_validator("site_url")
    @classmethod
    def _site_url_absolute(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value if is_http_url(value) else None


class ArticleInput(CamelModel):
    """Map-phase input derived from an Article."""

    id: str
    url: str
    title: str
    published_at: str | None = None
    content: str

    @classmethod
    def from_article(cls, article: Article) -> ArticleInput:
        return cls(
            id=article.id,
            url=article.url,
            title=article.title,
            published_at=article.published_at.isoformat() if article.published_at else None,
            content=article.summary or article.title,
        )


class Claim(CamelModel):
    text: str
    quote: str | None = Field(
        default=None, description="Verbatim quote from the source supporting the claim."
    )


class ArticleSummary(CamelModel):
    """Structured per-article extraction returned by the map phase."""

    url: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    published_at: str | None = None
    claims: list[Claim] = Field(default_factory=list)
    key_facts: list[str] = Field(default_factory=list)
    stance: str | None = None
    uncertainties: list[str] | None = None


class SynthesisSection(CamelModel):
    heading: str | None = None
    paragraphs: list[str] = Field(default_factory=list)


class TimelineEntry(CamelModel):
    date: str | None = None
    event: str


class SynthesisBody(CamelModel):
    headline: str = Field(..., min_length=1)
    dek: str | None = None
    sections: list[SynthesisSection] = Field(default_factory=list)
    timeline: list[TimelineEntry] | None = None
    key_takeaways: list[str] = Field(default_factory=list)
    risks: list[str] | None = None
    open_questions: list[str] | None = None


class SourceRef(CamelModel):
    url: str
    title: str = ""


class SynthesisDraft(CamelModel):
    """Shape the reduce-phase model must return."""

    summary: SynthesisBody
    sources: list[SourceRef]


class Synthesis(CamelModel):
    """Cited briefing built from per-article summaries."""

    topic_id: str
    generated_at: datetime
    summary: SynthesisBody
    sources: list[SourceRef] = Field(default_factory=list)
