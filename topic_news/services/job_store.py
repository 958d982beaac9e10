"""In-process registry of synthesis jobs and their lifecycle.

Jobs live only in this process's memory and are lost on restart. A job moves
strictly ``queued -> running -> done|error``; ``result`` is set only when done
and ``error`` only when failed.
"""

from __future__ import annotations

import secrets
import threading
from datetime import timedelta

from topic_news.core.logging import get_logger
from topic_news.core.settings import get_settings
from topic_news.models.jobs import ALLOWED_TRANSITIONS, Job, JobStatus
from topic_news.models.news import Synthesis
from topic_news.utils.dates import utcnow

logger = get_logger(__name__)


class JobNotFoundError(Exception):
    """Raised when a job ID is unknown to this process."""


class JobAccessDeniedError(Exception):
    """Raised when a job is requested by a user who does not own it."""


class InvalidJobTransitionError(Exception):
    """Raised on any transition outside queued -> running -> done|error."""


class JobStore:
    """Thread-safe map of job ID to Job."""

    def __init__(self, retention: timedelta | None = None):
        if retention is None:
            retention = timedelta(minutes=get_settings().job_retention_minutes)
        self.retention = retention
        self._jobs: dict[str, Job] = {}
        self._lock = threading.Lock()

    def create(self, topic_id: str, user_id: str) -> str:
        """Insert a queued job and return its opaque ID."""
        job_id = secrets.token_urlsafe(16)
        job = Job(id=job_id, topic_id=topic_id, user_id=user_id, created_at=utcnow())
        with self._lock:
            self._prune_locked()
            self._jobs[job_id] = job
        logger.info(
            "Created synthesis job %s for topic %s",
            job_id,
            topic_id,
            extra={"component": "job_store", "operation": "create", "item_id": job_id},
        )
        return job_id

    def start_processing(self, job_id: str) -> None:
        with self._lock:
            job = self._transition_locked(job_id, JobStatus.RUNNING)
            job.started_at = utcnow()

    def complete(self, job_id: str, result: Synthesis) -> None:
        with self._lock:
            job = self._transition_locked(job_id, JobStatus.DONE)
            job.result = result
            job.completed_at = utcnow()
        logger.info(
            "Job %s completed",
            job_id,
            extra={"component": "job_store", "operation": "complete", "item_id": job_id},
        )

    def fail(self, job_id: str, error: str) -> None:
        with self._lock:
            job = self._transition_locked(job_id, JobStatus.ERROR)
            job.error = error
            job.completed_at = utcnow()
        logger.warning(
            "Job %s failed: %s",
            job_id,
            error,
            extra={"component": "job_store", "operation": "fail", "item_id": job_id},
        )

    def get(self, job_id: str, requesting_user_id: str) -> Job:
        """Return a snapshot of the job.

        Raises:
            JobNotFoundError: Unknown job ID.
            JobAccessDeniedError: The job belongs to another user.
        """
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                raise JobNotFoundError(job_id)
            if job.user_id != requesting_user_id:
                raise JobAccessDeniedError(job_id)
            return job.model_copy(deep=True)

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    def _transition_locked(self, job_id: str, target: JobStatus) -> Job:
        job = self._jobs.get(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        if target not in ALLOWED_TRANSITIONS[job.status]:
            raise InvalidJobTransitionError(
                f"job {job_id}: {job.status.value} -> {target.value} is not allowed"
            )
        job.status = target
        return job

    def _prune_locked(self) -> None:
        cutoff = utcnow() - self.retention
        expired = [
            job_id
            for job_id, job in self._jobs.items()
            if job.is_finished and job.completed_at is not None and job.completed_at < cutoff
        ]
        for job_id in expired:
            del self._jobs[job_id]
        if expired:
            logger.debug("Pruned %s finished jobs", len(expired))


_job_store: JobStore | None = None


def get_job_store() -> JobStore:
    """Return the process-wide JobStore (also used as a FastAPI dependency)."""
    global _job_store
    if _job_store is None:
        _job_store = JobStore()
    return _job_store
