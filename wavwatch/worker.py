"""
wavwatch.worker
~~~~~~~~~~~~~~~
QThread that drains the JobQueue one job at a time.

There is exactly one worker, so at most one ffmpeg runs at any moment and
a burst of new files simply waits in the queue.

Signals
-------
job_started(Job)
job_finished(Job, TranscodeOutcome)   emitted whether the job succeeded or not
"""

from __future__ import annotations

import logging
from typing import Callable

from PySide6.QtCore import QThread, Signal

from wavwatch.errors import ReceiveError
from wavwatch.job_queue import JobQueue
from wavwatch.models import Job, TranscodeOutcome

logger = logging.getLogger(__name__)


class TranscodeWorker(QThread):

    job_started  = Signal(object)
    job_finished = Signal(object, object)

    def __init__(
        self,
        queue: JobQueue,
        transcoder: Callable[[Job], TranscodeOutcome],
        parent=None,
    ):
        super().__init__(parent)
        self._queue = queue
        self._transcoder = transcoder
        self.processed = 0

    # ── QThread entry point ───────────────────────────────────────────────────

    def run(self):
        logger.info("Worker started")
        while True:
            try:
                job = self._queue.get()
            except ReceiveError as exc:
                # The queue never reopens; looping here would only spin.
                logger.error("Error receiving job: %s", exc)
                break
            self._process(job)
        logger.info("Worker stopped after %d job(s)", self.processed)

    # ── Cancel ────────────────────────────────────────────────────────────────

    def cancel(self):
        cancel = getattr(self._transcoder, "cancel", None)
        if cancel is not None:
            cancel()

    # ── Internal ──────────────────────────────────────────────────────────────

    def _process(self, job: Job) -> TranscodeOutcome:
        logger.info("Processing file: %s", job.source_path)
        self.job_started.emit(job)
        try:
            outcome = self._transcoder(job)
        except Exception as exc:
            logger.exception("Unexpected error while transcoding %s", job.source_path)
            outcome = TranscodeOutcome.failure(job, str(exc))
        self.processed += 1
        logger.info("Done processing file: %s", job.source_path)
        self.job_finished.emit(job, outcome)
        return outcome
