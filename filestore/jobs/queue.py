"""Typed jobs on top of RQ.

RQ gives durable storage in redis and single delivery (a job is popped by one
worker only). This module adds the job states and the retry policy: a failed
attempt is re-enqueued as a new RQ job with ``attempt + 1`` until
``max_attempts`` is reached, unless the error says it is not retryable.
"""

import enum
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Callable, Dict, Optional, Sequence

from flask import current_app
from redis.exceptions import RedisError
from rq import Queue, get_current_job
from rq.exceptions import DequeueTimeout

from ..errors import InternalError, JobError


class JobKind(str, enum.Enum):
    THUMBNAIL = "thumbnail"
    WELCOME = "welcome"


QUEUE_NAMES = {
    JobKind.THUMBNAIL: "fileQueue",
    JobKind.WELCOME: "userQueue",
}


class JobState(str, enum.Enum):
    ENQUEUED = "enqueued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED_RETRYABLE = "failed_retryable"
    FAILED_FINAL = "failed_final"


@dataclass
class Job:
    kind: JobKind
    payload: Dict[str, Any]
    attempt: int = 1
    state: JobState = JobState.ENQUEUED
    id: Optional[str] = None
    error: Optional[str] = None
    rq_job: Any = field(default=None, repr=False, compare=False)

    @property
    def failed(self) -> bool:
        return self.state in (JobState.FAILED_RETRYABLE, JobState.FAILED_FINAL)


class JobQueue:
    def __init__(self, queues: Dict[JobKind, Queue], max_attempts: int = 3, backoff: Sequence[int] = ()):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.queues = queues
        self.max_attempts = max_attempts
        self.backoff = list(backoff)

    @classmethod
    def from_connection(cls, connection, **kwargs) -> "JobQueue":
        queues = {kind: Queue(name, connection=connection) for kind, name in QUEUE_NAMES.items()}
        return cls(queues, **kwargs)

    def enqueue(self, kind, payload, attempt: int = 1, delay: int = 0) -> Job:
        kind = JobKind(kind)
        job = Job(kind=kind, payload=dict(payload), attempt=attempt)
        queue = self.queues[kind]
        args = (kind.value, job.payload, attempt)
        meta = {"state": job.state.value, "attempt": attempt}
        try:
            if delay:
                # picked up by the worker's scheduler once due
                rq_job = queue.enqueue_in(timedelta(seconds=delay), perform, *args, meta=meta)
            else:
                rq_job = queue.enqueue(perform, *args, meta=meta)
        except RedisError as e:
            raise InternalError() from e
        job.id = rq_job.id
        job.rq_job = rq_job
        return job

    def dequeue(self, timeout: Optional[int] = None) -> Optional[Job]:
        """Pop the next job from any kind's queue; ``None`` when nothing is waiting.

        The job is not registered as started with RQ: losing this process
        loses the job. Workers run through ``perform`` instead.
        """
        queues = list(self.queues.values())
        try:
            result = Queue.dequeue_any(queues, timeout, connection=queues[0].connection)
        except DequeueTimeout:
            return None
        except RedisError as e:
            raise InternalError() from e
        if result is None:
            return None
        rq_job, _queue = result
        kind, payload, attempt = rq_job.args
        job = Job(kind=JobKind(kind), payload=payload, attempt=attempt, id=rq_job.id, rq_job=rq_job)
        self._mark(job, JobState.PROCESSING)
        return job

    def ack(self, job: Job) -> Job:
        self._mark(job, JobState.COMPLETED)
        current_app.logger.info("job %s %s completed (attempt %d)", job.kind.value, job.id, job.attempt)
        return job

    def fail(self, job: Job, error: Exception) -> Job:
        job.error = str(error)
        retryable = getattr(error, "retryable", True)
        if retryable and job.attempt < self.max_attempts:
            self._mark(job, JobState.FAILED_RETRYABLE)
            delay = self._delay_for(job.attempt)
            current_app.logger.warning("job %s %s failed (attempt %d/%d), retrying in %ss: %s",
                                       job.kind.value, job.id, job.attempt, self.max_attempts, delay, error)
            self.enqueue(job.kind, job.payload, attempt=job.attempt + 1, delay=delay)
        else:
            self._mark(job, JobState.FAILED_FINAL)
            current_app.logger.error("job %s %s failed for good (attempt %d/%d): %s",
                                     job.kind.value, job.id, job.attempt, self.max_attempts, error)
        return job

    def run(self, job: Job, handler: Callable[[Dict[str, Any]], Any]) -> Job:
        """Execute one attempt of ``job`` and settle it through ack or fail."""
        if job.state is not JobState.PROCESSING:
            self._mark(job, JobState.PROCESSING)
        try:
            handler(job.payload)
        except Exception as e:  # contained per job, routed to the retry policy
            return self.fail(job, e)
        return self.ack(job)

    def process_next(self, timeout: Optional[int] = None) -> Optional[Job]:
        job = self.dequeue(timeout)
        if job is None:
            return None
        return self.run(job, handler_for(job.kind))

    def _delay_for(self, attempt: int) -> int:
        if not self.backoff:
            return 0
        return self.backoff[min(attempt - 1, len(self.backoff) - 1)]

    def _mark(self, job: Job, state: JobState) -> None:
        job.state = state
        if job.rq_job is not None:
            job.rq_job.meta["state"] = state.value
            job.rq_job.meta["attempt"] = job.attempt
            if job.error:
                job.rq_job.meta["error"] = job.error
            job.rq_job.save_meta()


def handler_for(kind: JobKind) -> Callable[[Dict[str, Any]], Any]:
    from .notify import welcome_job
    from .thumbnails import thumbnail_job

    handlers = {
        JobKind.THUMBNAIL: thumbnail_job,
        JobKind.WELCOME: welcome_job,
    }
    return handlers[JobKind(kind)]


def perform(kind: str, payload: Dict[str, Any], attempt: int = 1):
    """Entry point RQ workers call for every job this module enqueues.

    Re-raises after a failed attempt so RQ keeps the attempt in its failed
    job registry; the retry itself was already scheduled by ``fail``.
    """
    jobs = current_app.extensions["rq"].jobs
    rq_job = get_current_job()
    job = Job(kind=JobKind(kind), payload=payload, attempt=attempt,
              id=rq_job.id if rq_job else None, rq_job=rq_job)
    jobs.run(job, handler_for(job.kind))
    if job.failed:
        raise JobError(job.error)
    return job.state.value
