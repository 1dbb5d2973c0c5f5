"""
wavwatch.transcode
~~~~~~~~~~~~~~~~~~
Runs ffmpeg once per job and classifies the result.

The call blocks until the child exits; there is no timeout. A child that
cannot be launched (binary missing, not executable) is reported as a
LAUNCH_FAILED outcome instead of an exception so the worker keeps going.
"""

from __future__ import annotations

import logging
import subprocess
import threading

from wavwatch.command_builder import build_transcode_command, command_as_string
from wavwatch.errors import TranscodeExecutionFailure, TranscodeLaunchError
from wavwatch.models import Job, OutcomeStatus, TranscodeOutcome
from wavwatch.paths import DEFAULT_FFMPEG

logger = logging.getLogger(__name__)


class FfmpegTranscoder:
    """Callable transcode step: ``transcoder(job) -> TranscodeOutcome``."""

    def __init__(self, ffmpeg_bin: str = DEFAULT_FFMPEG):
        self.ffmpeg_bin = ffmpeg_bin
        self._process: subprocess.Popen | None = None
        self._cancelled = False
        self._lock = threading.Lock()

    def __call__(self, job: Job) -> TranscodeOutcome:
        output_file = job.output_path
        cmd = build_transcode_command(self.ffmpeg_bin, job.source_path, output_file)
        logger.debug("Command: %s", command_as_string(cmd))

        try:
            self._run(cmd)
        except TranscodeLaunchError as exc:
            logger.error("Could not launch transcoder for %s: %s", job.source_path, exc)
            return TranscodeOutcome.failure(
                job, str(exc), status=OutcomeStatus.LAUNCH_FAILED
            )
        except TranscodeExecutionFailure as exc:
            logger.error("Transcoding failed: %s", exc.stderr.strip() or exc)
            return TranscodeOutcome.failure(job, exc.stderr, exc.returncode)

        logger.info("Transcoding successful, saved to %s", output_file)
        return TranscodeOutcome.success(job, output_file)

    # ── Cancel ────────────────────────────────────────────────────────────────

    def cancel(self) -> None:
        """
        Terminate the running child, if there is one.

        Sticky: a child launched after this call is terminated as soon as
        it starts, which covers a job taken off the queue just before.
        """
        with self._lock:
            self._cancelled = True
            process = self._process
        if process is not None and process.poll() is None:
            logger.warning("Terminating transcoder (PID %s)", process.pid)
            process.terminate()

    # ── Internal ──────────────────────────────────────────────────────────────

    def _run(self, cmd: list[str]) -> None:
        try:
            process = subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
            )
        except OSError as exc:
            raise TranscodeLaunchError(f"{cmd[0]}: {exc.strerror or exc}") from exc

        with self._lock:
            self._process = process
            cancelled = self._cancelled
        if cancelled:
            process.terminate()
        try:
            # communicate() drains both pipes, so a chatty ffmpeg cannot
            # fill the stderr buffer and stall.
            _, stderr = process.communicate()
        finally:
            with self._lock:
                self._process = None

        if process.returncode != 0:
            if process.returncode < 0 and not stderr.strip():
                stderr = f"terminated by signal {-process.returncode}"
            raise TranscodeExecutionFailure(process.returncode, stderr)
