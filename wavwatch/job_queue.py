"""
wavwatch.job_queue
~~~~~~~~~~~~~~~~~~
In-memory FIFO carrying Jobs from the watcher to the worker.

put() never waits for the consumer, so the watchdog thread can never be
stalled by a slow transcode. By default the queue is unbounded; a bound
is opt-in and then needs an overflow policy:

    reject       the new job is refused with QueueFullError
    drop-oldest  the oldest pending job is evicted to make room

Nothing is persisted: closing the queue (or the process dying) loses
whatever is still pending.
"""

from __future__ import annotations

import logging
import threading
from collections import deque

from wavwatch.errors import QueueClosedError, QueueFullError, ReceiveError
from wavwatch.models import Job

logger = logging.getLogger(__name__)

OVERFLOW_REJECT      = "reject"
OVERFLOW_DROP_OLDEST = "drop-oldest"
OVERFLOW_POLICIES    = (OVERFLOW_REJECT, OVERFLOW_DROP_OLDEST)


class JobQueue:
    """Multi-producer / single-consumer job channel."""

    def __init__(self, max_pending: int = 0, overflow: str = OVERFLOW_REJECT):
        if max_pending < 0:
            raise ValueError("max_pending must be >= 0")
        if overflow not in OVERFLOW_POLICIES:
            raise ValueError(f"unknown overflow policy: {overflow!r}")
        self.max_pending = max_pending
        self.overflow = overflow
        self._jobs: deque[Job] = deque()
        self._closed = False
        self._ready = threading.Condition()

    def __len__(self) -> int:
        with self._ready:
            return len(self._jobs)

    @property
    def closed(self) -> bool:
        return self._closed

    # ── Producer side ─────────────────────────────────────────────────────────

    def put(self, job: Job) -> None:
        with self._ready:
            if self._closed:
                raise QueueClosedError("queue is closed")
            if self.max_pending and len(self._jobs) >= self.max_pending:
                if self.overflow == OVERFLOW_REJECT:
                    raise QueueFullError(
                        f"queue is full ({self.max_pending} pending jobs)"
                    )
                dropped = self._jobs.popleft()
                logger.warning("Queue full, dropping oldest job: %s",
                               dropped.source_path)
            self._jobs.append(job)
            self._ready.notify()

    # ── Consumer side ─────────────────────────────────────────────────────────

    def get(self) -> Job:
        """Block until a job is available. Raises ReceiveError once closed and empty."""
        with self._ready:
            while not self._jobs:
                if self._closed:
                    raise ReceiveError("queue is closed")
                self._ready.wait()
            return self._jobs.popleft()

    # ── Shutdown ──────────────────────────────────────────────────────────────

    def close(self, discard: bool = False) -> int:
        """
        Refuse further puts and wake the consumer.

        With discard=True the pending jobs are dropped and the consumer's
        next get() raises straight away. Returns the number dropped.
        """
        with self._ready:
            self._closed = True
            dropped = 0
            if discard:
                dropped = len(self._jobs)
                self._jobs.clear()
            self._ready.notify_all()
        return dropped
