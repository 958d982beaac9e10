"""Synthesis job lifecycle models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from topic_news.models.news import CamelModel, Synthesis


class JobStatus(str, Enum):
    QUEUED = "queued"
    RUNNING = "running"
    DONE = "done"
    ERROR = "error"


# queued -> running -> done|error; nothing else
ALLOWED_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.QUEUED: frozenset({JobStatus.RUNNING}),
    JobStatus.RUNNING: frozenset({JobStatus.DONE, JobStatus.ERROR}),
    JobStatus.DONE: frozenset(),
    JobStatus.ERROR: frozenset(),
}


class Job(CamelModel):
    id: str
    status: JobStatus = JobStatus.QUEUED
    topic_id: str
    user_id: str
    created_at: datetime
    started_at: datetime | None = None
    completed_at: datetime | None = None
    result: Synthesis | None = None
    error: str | None = None

    @property
    def is_finished(self) -> bool:
        return self.status in {JobStatus.DONE, JobStatus.ERROR}
