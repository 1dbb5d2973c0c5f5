"""
wavwatch.cli
~~~~~~~~~~~~
Command-line entry point.

Both spellings are accepted:

    wavwatch -i /input -o /output
    wavwatch /input /output
"""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from dataclasses import replace

from PySide6.QtCore import QCoreApplication, QTimer

from wavwatch import __version__
from wavwatch.config import LOG_LEVELS, Settings, load_settings
from wavwatch.errors import ConfigError, OutputSetupError, WatchSetupError
from wavwatch.job_queue import OVERFLOW_POLICIES
from wavwatch.log import configure_logging
from wavwatch.paths import resolve_binary, validate_binary
from wavwatch.supervisor import Supervisor

logger = logging.getLogger(__name__)

# How often the Qt loop hands control back to Python so that signal
# handlers get a chance to run.
SIGNAL_POLL_MS = 250


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wavwatch",
        description="Watch a directory and transcode new audio files to "
                    "16 kHz mono 16-bit WAV with ffmpeg.",
    )
    parser.add_argument("positional", nargs="*", metavar="DIR",
                        help="input and output directory (alternative to -i/-o)")
    parser.add_argument("-i", "--input-dir", metavar="INPUT_DIR",
                        help="directory to watch (recursively)")
    parser.add_argument("-o", "--output-dir", metavar="OUTPUT_DIR",
                        help="directory to write *_transcoded.wav files to")
    parser.add_argument("--ffmpeg", dest="ffmpeg_bin", metavar="PATH",
                        help="ffmpeg binary (default: ffmpeg on PATH)")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS,
                        help="logging level (default: INFO)")
    parser.add_argument("--max-pending", type=int, metavar="N",
                        help="bound the queue to N jobs (default: 0, unbounded)")
    parser.add_argument("--overflow", choices=OVERFLOW_POLICIES,
                        help="what to do when a bounded queue is full")
    parser.add_argument("--config", metavar="FILE",
                        help="settings file (default: platform config dir)")
    parser.add_argument("--version", action="version",
                        version=f"%(prog)s {__version__}")
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse *argv*, filling whichever of -i/-o is missing from the positionals.

    Exits with status 2 and a usage message when a directory is missing or
    there are leftover arguments.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    positional = list(args.positional)
    if args.input_dir is None and positional:
        args.input_dir = positional.pop(0)
    if args.output_dir is None and positional:
        args.output_dir = positional.pop(0)
    if positional:
        parser.error(f"unrecognized arguments: {' '.join(positional)}")
    if args.input_dir is None:
        parser.error("an input directory is required (-i/--input-dir or first positional)")
    if args.output_dir is None:
        parser.error("an output directory is required (-o/--output-dir or second positional)")
    if args.max_pending is not None and args.max_pending < 0:
        parser.error("--max-pending must be >= 0")
    return args


def settings_from_args(args: argparse.Namespace) -> Settings:
    overrides = {
        "ffmpeg_bin":  args.ffmpeg_bin,
        "log_level":   args.log_level,
        "max_pending": args.max_pending,
        "overflow":    args.overflow,
    }
    return load_settings(args.input_dir, args.output_dir, overrides, args.config)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        settings = settings_from_args(args)
    except ConfigError as exc:
        build_parser().error(str(exc))

    configure_logging(settings.log_level)
    settings = replace(settings, ffmpeg_bin=resolve_binary(settings.ffmpeg_bin))
    for problem in validate_binary(settings.ffmpeg_bin):
        logger.warning("%s (every job will fail until this is fixed)", problem)

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])

    supervisor = Supervisor(settings)
    try:
        supervisor.start()
    except (OutputSetupError, WatchSetupError) as exc:
        logger.error("Failed to start: %s", exc)
        supervisor.shutdown()
        return 1

    supervisor.stopped.connect(lambda code: app.exit(code))

    def _on_signal(signum, _frame):
        logger.info("Received %s", signal.Signals(signum).name)
        supervisor.shutdown()
        app.exit(0)

    signal.signal(signal.SIGINT, _on_signal)
    signal.signal(signal.SIGTERM, _on_signal)

    # Qt's loop runs in C++; without a periodic tick Python never gets to
    # run the handlers above.
    ticker = QTimer()
    ticker.timeout.connect(lambda: None)
    ticker.start(SIGNAL_POLL_MS)

    code = app.exec()
    ticker.stop()
    return code
