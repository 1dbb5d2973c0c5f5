"""
wavwatch.log
~~~~~~~~~~~~
Console logging setup. Called once from main(); library modules only ever
do ``logging.getLogger(__name__)``.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT  = "%(asctime)s.%(msecs)03d %(levelname)-7s [%(threadName)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def configure_logging(level: str = "INFO") -> None:
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(level.upper())

    # watchdog logs every inotify event at DEBUG; only show that when asked
    watchdog_logger = logging.getLogger("watchdog")
    if root_logger.level > logging.DEBUG:
        watchdog_logger.setLevel(logging.INFO)
    else:
        watchdog_logger.setLevel(logging.NOTSET)
