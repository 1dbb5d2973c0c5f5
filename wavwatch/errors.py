"""
wavwatch.errors
~~~~~~~~~~~~~~~
Exception types shared by the pipeline.

Only the setup errors (config, watch subscription) are allowed to reach
main(); everything raised while handling a single job is caught by the
worker and turned into a TranscodeOutcome.
"""

from __future__ import annotations


class WavWatchError(Exception):
    """Base class for every error raised by wavwatch."""


class ConfigError(WavWatchError):
    """The settings file is missing, unreadable or malformed."""


class WatchSetupError(WavWatchError):
    """The input directory cannot be watched (missing, not a dir, OS limits)."""


class OutputSetupError(WavWatchError):
    """The output directory cannot be created or is not a directory."""


class EnqueueError(WavWatchError):
    """A job could not be handed to the queue."""


class QueueFullError(EnqueueError):
    """A bounded queue with the reject policy refused the job."""


class QueueClosedError(EnqueueError):
    """The consumer side is gone; nothing will ever be accepted again."""



class ReceiveError(WavWatchError):
    """The queue has been closed; no more jobs will ever arrive."""


class TranscodeLaunchError(WavWatchError):
    """The transcoder binary could not be started at all."""


class TranscodeExecutionFailure(WavWatchError):
    """The transcoder ran but exited non-zero or was killed by a signal."""

    def __init__(self, returncode: int, stderr: str):
        super().__init__(f"transcoder exited with code {returncode}")
        self.returncode = returncode
        self.stderr = stderr
