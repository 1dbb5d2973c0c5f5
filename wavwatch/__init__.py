from .models import Job, TranscodeOutcome, OutcomeStatus
from .naming import stem_of, build_output_path
from .command_builder import build_transcode_command
from .job_queue import JobQueue
from .transcode import FfmpegTranscoder
from .watcher import CreationEventHandler, DirectoryWatcher, start_watcher
from .worker import TranscodeWorker
from .supervisor import Supervisor

__version__ = "0.1.0"

__all__ = [
    "Job", "TranscodeOutcome", "OutcomeStatus",
    "stem_of", "build_output_path",
    "build_transcode_command",
    "JobQueue",
    "FfmpegTranscoder",
    "CreationEventHandler", "DirectoryWatcher", "start_watcher",
    "TranscodeWorker",
    "Supervisor",
]
