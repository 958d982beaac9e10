from sqlalchemy import Column, DateTime, ForeignKey, Index, String
from sqlalchemy.sql import func

from topic_news.core.db import Base


class Topic(Base):
    __tablename__ = "topics"

    id = Column(String(64), primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class Feed(Base):
    __tablename__ = "feeds"

    id = Column(String(64), primary_key=True)
    topic_id = Column(String(64), ForeignKey("topics.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=True)
    feed_url = Column(String(2048), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (Index("idx_feeds_topic_id", "topic_id"),)
