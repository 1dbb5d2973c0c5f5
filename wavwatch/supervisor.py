"""
wavwatch.supervisor
~~~~~~~~~~~~~~~~~~~
Supervisor wires watcher → queue → worker and owns their lifetimes.

After start() the supervisor does nothing on its own; the Qt event loop in
main() keeps the process alive. It only acts again when:
  - shutdown() is requested (signal handler), or
  - the worker thread exits on its own, or
  - the watcher reports that it can no longer enqueue.
The last two are unrecoverable and end with stopped(1).
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from PySide6.QtCore import QObject, Signal, Slot

from wavwatch.config import Settings
from wavwatch.errors import OutputSetupError
from wavwatch.job_queue import JobQueue
from wavwatch.models import Job, TranscodeOutcome
from wavwatch.transcode import FfmpegTranscoder
from wavwatch.watcher import DirectoryWatcher, start_watcher
from wavwatch.worker import TranscodeWorker

logger = logging.getLogger(__name__)


class Supervisor(QObject):

    stopped          = Signal(int)   # process exit code
    pipeline_broken  = Signal()      # emitted from the watchdog thread

    def __init__(
        self,
        settings: Settings,
        transcoder: Optional[Callable[[Job], TranscodeOutcome]] = None,
        parent=None,
    ):
        super().__init__(parent)
        self.settings = settings
        self._transcoder = transcoder or FfmpegTranscoder(settings.ffmpeg_bin)
        self._queue: JobQueue | None = None
        self._watcher: DirectoryWatcher | None = None
        self._worker: TranscodeWorker | None = None
        self._stopping = False

        self.pipeline_broken.connect(self._on_pipeline_broken)

    @property
    def queue(self) -> JobQueue | None:
        return self._queue

    @property
    def watcher(self) -> DirectoryWatcher | None:
        return self._watcher

    @property
    def worker(self) -> TranscodeWorker | None:
        return self._worker

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def start(self) -> None:
        """
        Bring the pipeline up.

        Raises:
            OutputSetupError – the output directory cannot be created
            WatchSetupError  – the input directory cannot be watched
        """
        s = self.settings
        logger.info("Starting: input='%s' output='%s' ffmpeg='%s'",
                    s.input_dir, s.output_dir, s.ffmpeg_bin)
        try:
            s.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OutputSetupError(
                f"Cannot use output directory {s.output_dir}: {exc.strerror or exc}"
            ) from exc

        self._queue = JobQueue(s.max_pending, s.overflow)
        self._watcher = start_watcher(
            s.input_dir,
            self._queue,
            s.output_dir,
            failure_limit=s.enqueue_failure_limit,
            on_broken=self.pipeline_broken.emit,
        )

        self._worker = TranscodeWorker(self._queue, self._transcoder, parent=self)
        self._worker.finished.connect(self._on_worker_finished)
        self._worker.start()

    def shutdown(self) -> None:
        """Stop watching, drop queued jobs and wait for the worker. Idempotent."""
        if self._stopping:
            return
        self._stopping = True
        logger.info("Shutting down")

        if self._watcher is not None:
            self._watcher.stop()

        if self._queue is not None:
            dropped = self._queue.close(discard=True)
            if dropped:
                logger.warning("Dropped %d queued job(s)", dropped)

        if self._worker is not None:
            self._worker.cancel()
            if not self._worker.wait(int(self.settings.shutdown_timeout * 1000)):
                logger.warning("Worker still busy after %.1fs, waiting for it",
                               self.settings.shutdown_timeout)
                self._worker.wait()

    # ── Slots ─────────────────────────────────────────────────────────────────

    @Slot()
    def _on_worker_finished(self) -> None:
        if self._stopping:
            return
        logger.error("Worker stopped unexpectedly")
        self.shutdown()
        self.stopped.emit(1)

    @Slot()
    def _on_pipeline_broken(self) -> None:
        if self._stopping:
            return
        logger.error("Watcher can no longer queue jobs, exiting")
        self.shutdown()
        self.stopped.emit(1)
