"""Test configuration and fixtures."""

import os
import tempfile

# Settings are cached on first use, so the environment must be set before any app import
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOGS_DIR", tempfile.mkdtemp(prefix="topic-news-logs-"))
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from topic_news.core.db import Base  # noqa: E402
from topic_news.core.security import create_access_token  # noqa: E402
from topic_news.core.settings import get_settings  # noqa: E402
from topic_news.main import app  # noqa: E402
from topic_news.models import schema  # noqa: E402,F401
from topic_news.models.schema import Feed, Topic  # noqa: E402
from topic_news.services.job_store import JobStore, get_job_store  # noqa: E402

TEST_USER_ID = "user-1"
OTHER_USER_ID = "user-2"


@pytest.fixture
def test_db():
    """Create a test database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(test_db):
    """Create a test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_db)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def job_store() -> JobStore:
    return JobStore()


@pytest.fixture
def client(db_session, job_store):
    """Create a test client with database and job store overrides."""
    from topic_news.core.db import get_db_session

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db_session] = override_get_db
    app.dependency_overrides[get_job_store] = lambda: job_store

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(TEST_USER_ID)}"}


@pytest.fixture
def other_auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(OTHER_USER_ID)}"}


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def topic_with_feeds(db_session):
    """Topic owned by the test user with one live and one unreachable feed."""
    topic = Topic(id="topic-1", user_id=TEST_USER_ID, name="Space")
    db_session.add(topic)
    db_session.add_all(
        [
            Feed(id="feed-live", topic_id=topic.id, name="Live", feed_url="https://live.test/rss"),
            Feed(id="feed-down", topic_id=topic.id, name="Down", feed_url="https://down.test/rss"),
        ]
    )
    db_session.commit()
    return topic


@pytest.fixture
def empty_topic(db_session):
    topic = Topic(id="topic-empty", user_id=TEST_USER_ID, name="Nothing yet")
    db_session.add(topic)
    db_session.commit()
    return topic
