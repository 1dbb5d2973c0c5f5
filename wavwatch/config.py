"""
wavwatch.config
~~~~~~~~~~~~~~~
Runtime settings, read from an optional JSON file in the platform's
standard config directory and overridden by command-line flags.

Config location
---------------
  Windows  : %APPDATA%\\WavWatch\\settings.json
  macOS    : ~/Library/Application Support/WavWatch/settings.json
  Linux    : ~/.config/WavWatch/settings.json

Example file:

    {
      "ffmpeg_bin": "/usr/local/bin/ffmpeg",
      "log_level": "DEBUG",
      "max_pending": 500,
      "overflow": "drop-oldest"
    }
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

from wavwatch.errors import ConfigError
from wavwatch.job_queue import OVERFLOW_POLICIES, OVERFLOW_REJECT
from wavwatch.paths import DEFAULT_FFMPEG, default_settings_file
from wavwatch.watcher import DEFAULT_FAILURE_LIMIT

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    input_dir: Path
    output_dir: Path
    ffmpeg_bin: str = DEFAULT_FFMPEG
    log_level: str = "INFO"
    max_pending: int = 0                     # 0 = unbounded
    overflow: str = OVERFLOW_REJECT
    enqueue_failure_limit: int = DEFAULT_FAILURE_LIMIT
    shutdown_timeout: float = 5.0            # seconds to wait for the worker

    def __post_init__(self):
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(f"unknown log level: {self.log_level!r}")
        if self.max_pending < 0:
            raise ConfigError("max_pending must be >= 0")
        if self.overflow not in OVERFLOW_POLICIES:
            raise ConfigError(f"unknown overflow policy: {self.overflow!r}")
        if self.enqueue_failure_limit < 1:
            raise ConfigError("enqueue_failure_limit must be >= 1")


# Keys that may appear in the settings file. The directories always come
# from the command line.
FILE_KEYS = {f.name for f in fields(Settings)} - {"input_dir", "output_dir"}


# ── Public API ────────────────────────────────────────────────────────────────

def load_settings(
    input_dir: Path,
    output_dir: Path,
    overrides: Mapping[str, Any] | None = None,
    config_file: Path | None = None,
) -> Settings:
    """
    Build Settings from defaults, the settings file, then *overrides*.

    A missing default settings file is fine; a missing file that was asked
    for explicitly, or one that does not parse, raises ConfigError.
    """
    settings = Settings(input_dir=Path(input_dir), output_dir=Path(output_dir))

    explicit = config_file is not None
    path = Path(config_file) if explicit else default_settings_file()
    if path.exists():
        settings = replace(settings, **_read_file(path))
        logging.getLogger(__name__).debug("Loaded settings from %s", path)
    elif explicit:
        raise ConfigError(f"Settings file not found: {path}")

    cli = {k: v for k, v in (overrides or {}).items() if v is not None}
    if cli:
        settings = replace(settings, **cli)
    return settings


# ── Serialisation helpers ─────────────────────────────────────────────────────

def _read_file(path: Path) -> dict:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Cannot read settings file {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError(f"Settings file {path} must contain a JSON object")

    unknown = set(payload) - FILE_KEYS
    if unknown:
        raise ConfigError(
            f"Unknown setting(s) in {path}: {', '.join(sorted(unknown))}"
        )
    try:
        return {
            key: _coerce(key, value) for key, value in payload.items()
        }
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Bad value in {path}: {exc}") from exc


def _coerce(key: str, value: Any) -> Any:
    if key in ("max_pending", "enqueue_failure_limit"):
        return int(value)
    if key == "shutdown_timeout":
        return float(value)
    return str(value)
