"""
wavwatch.models
~~~~~~~~~~~~~~~
Pure dataclasses — no Qt, no I/O.
These travel freely between the watcher, the queue and the worker.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path

from wavwatch.naming import build_output_path


# ── Enums ─────────────────────────────────────────────────────────────────────

class OutcomeStatus(Enum):
    SUCCESS       = auto()  # transcoder exited 0
    FAILED        = auto()  # transcoder ran but exited non-zero / was signalled
    LAUNCH_FAILED = auto()  # transcoder could not be started at all


# ── Job ───────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Job:
    """
    One discovered file waiting to be transcoded.

    Jobs are only ever built by the watcher when a creation event comes in.
    `output_dir` is the same for every job; it is attached at enqueue time so
    the worker needs nothing but the job itself.
    """
    source_path: Path
    output_dir: Path

    @property
    def output_path(self) -> Path:
        return build_output_path(self.source_path, self.output_dir)


# ── Transcode outcome ─────────────────────────────────────────────────────────

@dataclass
class TranscodeOutcome:
    """Result of running the transcoder once for a job."""
    job: Job
    status: OutcomeStatus
    output_path: Path | None = None
    stderr: str = ""
    returncode: int | None = None

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS

    @classmethod
    def success(cls, job: Job, output_path: Path) -> "TranscodeOutcome":
        return cls(job=job, status=OutcomeStatus.SUCCESS,
                   output_path=output_path, returncode=0)

    @classmethod
    def failure(
        cls,
        job: Job,
        stderr: str,
        returncode: int | None = None,
        status: OutcomeStatus = OutcomeStatus.FAILED,
    ) -> "TranscodeOutcome":
        return cls(job=job, status=status, stderr=stderr, returncode=returncode)
