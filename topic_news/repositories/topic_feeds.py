"""Ownership-aware reads of the feeds attached to a topic."""

from __future__ import annotations

from sqlalchemy.orm import Session

from topic_news.models.news import TopicFeed
from topic_news.models.schema import Feed, Topic


def list_topic_feeds(db: Session, user_id: str, topic_id: str) -> list[TopicFeed]:
    """List the feeds of ``topic_id`` when the topic belongs to ``user_id``.

    Args:
        db: Active SQLAlchemy session.
        user_id: Authenticated caller.
        topic_id: Topic identifier from the request path.

    Returns:
        Feeds in creation order; empty for unknown or foreign topics.
    """
    rows = (
        db.query(Feed)
        .join(Topic, Topic.id == Feed.topic_id)
        .filter(Topic.id == topic_id, Topic.user_id == user_id)
        .order_by(Feed.created_at, Feed.id)
        .all()
    )
    return [TopicFeed(id=row.id, name=row.name, feed_url=row.feed_url) for row in rows]
