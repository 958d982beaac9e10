from functools import lru_cache
from pathlib import Path

from pydantic import PostgresDsn, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database - allow both PostgreSQL and SQLite for development
    database_url: PostgresDsn | str = "sqlite:///./topic_news.db"
    database_pool_size: int = 20
    database_max_overflow: int = 40

    # Application
    app_name: str = "Topic News"
    debug: bool = False
    log_level: str = "INFO"
    logs_dir: Path = Path("logs")

    # External services
    openai_api_key: str | None = None
    anthropic_api_key: str | None = None
    google_api_key: str | None = None

    # LLM models
    news_map_model: str = "openai:gpt-4o-mini"
    news_reduce_model: str = "openai:gpt-4o"
    feed_suggest_model: str = "openai:gpt-4o"
    llm_temperature: float = 0.2

    # Auth
    jwt_secret_key: str = "dev-secret-change-me"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    # Outbound feed requests
    http_user_agent: str = "TopicNews/1.0 (+https://example.com)"
    news_fetch_timeout_seconds: float = 10.0
    news_fetch_concurrency: int = 5
    feed_validation_timeout_seconds: float = 8.0
    feed_validation_max_bytes: int = 2_000_000
    feed_validation_concurrency: int = 6

    # Map-reduce summarization
    summarize_max_articles: int = 12
    summarize_concurrency: int = 4
    summarize_max_content_chars: int = 12_000

    # In-process job store
    job_retention_minutes: int = 60

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v):
        if not v:
            raise ValueError("DATABASE_URL must be set")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
