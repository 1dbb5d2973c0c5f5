"""
wavwatch.watcher
~~~~~~~~~~~~~~~~
Recursive filesystem watching with watchdog.

Only creation events become Jobs. Modified, deleted and metadata events
are ignored, and so is a rename inside the watched tree. A file moved in
from OUTSIDE the tree has no matching move-from event, so watchdog reports
it as a creation and it is queued like a newly written file.

Created paths are not checked here: a directory or a temp file that is
gone by the time the worker gets to it simply fails in the transcode step.

The handler runs on watchdog's emitter thread and only ever does a
non-blocking JobQueue.put().
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Callable, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from wavwatch.errors import QueueClosedError, QueueFullError, WatchSetupError
from wavwatch.job_queue import JobQueue
from wavwatch.models import Job

logger = logging.getLogger(__name__)

# Consecutive puts into a closed queue before the pipeline is considered
# broken. A full queue rejecting a job does not count.
DEFAULT_FAILURE_LIMIT = 3


class CreationEventHandler(FileSystemEventHandler):
    """Turns every watchdog creation event into one queued Job."""

    def __init__(
        self,
        queue: JobQueue,
        output_dir: Path,
        failure_limit: int = DEFAULT_FAILURE_LIMIT,
        on_broken: Optional[Callable[[], None]] = None,
    ):
        super().__init__()
        self.queue = queue
        self.output_dir = Path(output_dir)
        self.failure_limit = failure_limit
        self.on_broken = on_broken
        self._failures = 0
        self._lock = threading.Lock()

    def on_created(self, event: FileSystemEvent) -> None:
        self.enqueue(Path(os.fsdecode(event.src_path)))

    def enqueue(self, path: Path) -> None:
        logger.info("File created, adding to queue: %s", path)
        try:
            self.queue.put(Job(source_path=path, output_dir=self.output_dir))
        except QueueFullError as exc:
            # The worker is alive, just behind; this job is dropped.
            logger.error("Rejected %s: %s", path, exc)
        except QueueClosedError as exc:
            logger.error("Error queueing %s: %s", path, exc)
            self._record_failure()
            return
        with self._lock:
            self._failures = 0

    def _record_failure(self) -> None:
        with self._lock:
            self._failures += 1
            broken = self._failures == self.failure_limit
        if broken:
            logger.error("%d consecutive enqueue failures, pipeline is broken",
                         self.failure_limit)
            if self.on_broken is not None:
                self.on_broken()


class DirectoryWatcher:
    """Owns the watchdog Observer for one input directory."""

    def __init__(self, root: Path, handler: CreationEventHandler):
        self.root = Path(root)
        self.handler = handler
        self._observer: Observer | None = None

    @property
    def running(self) -> bool:
        return self._observer is not None and self._observer.is_alive()

    def start(self) -> None:
        """
        Subscribe to recursive change notifications on the root directory.

        Raises:
            WatchSetupError – the root is missing, is not a directory, or
                              the OS refused the subscription
        """
        root = self.root.resolve()
        if not root.exists():
            raise WatchSetupError(f"Path does not exist: {root}")
        if not root.is_dir():
            raise WatchSetupError(f"Path is not a directory: {root}")

        observer = Observer()
        try:
            observer.schedule(self.handler, str(root), recursive=True)
            observer.start()
        except OSError as exc:
            raise WatchSetupError(f"Cannot watch {root}: {exc}") from exc

        self._observer = observer
        logger.info("Watching directory: %s", root)

    def stop(self) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join()
        self._observer = None
        logger.info("Stopped watching %s", self.root)


def start_watcher(
    root: Path,
    queue: JobQueue,
    output_dir: Path,
    failure_limit: int = DEFAULT_FAILURE_LIMIT,
    on_broken: Optional[Callable[[], None]] = None,
) -> DirectoryWatcher:
    """Build the handler, start watching *root* and return the running watcher."""
    handler = CreationEventHandler(queue, output_dir, failure_limit, on_broken)
    watcher = DirectoryWatcher(root, handler)
    watcher.start()
    return watcher
