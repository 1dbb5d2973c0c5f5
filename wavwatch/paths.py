"""
wavwatch.paths
~~~~~~~~~~~~~~
Single source of truth for the external binary and config locations.
Import these instead of hard-coding strings anywhere else.
"""

from __future__ import annotations

import os
import shutil
import sys
from pathlib import Path

APP_NAME = "WavWatch"

# Used when neither --ffmpeg nor the settings file name a binary.
DEFAULT_FFMPEG = "ffmpeg"


def config_dir() -> Path:
    """Platform config directory. Not created here; wavwatch only reads it."""
    if sys.platform == "win32":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return base / APP_NAME


def default_settings_file() -> Path:
    return config_dir() / "settings.json"


def resolve_binary(name: str) -> str:
    """
    Turn a bare command name into an absolute path via PATH.

    Anything that already contains a directory part is returned unchanged,
    as is a name that is not on PATH; launching it later will then fail per
    job instead of at startup.
    """
    if os.sep in name or (os.altsep and os.altsep in name):
        return name
    return shutil.which(name) or name


def validate_binary(binary: str) -> list[str]:
    """
    Return a list of error strings if *binary* is missing/non-executable.
    Empty list means all good.

    Call this at startup and log the errors; they are not fatal.
    """
    errors: list[str] = []
    path = Path(resolve_binary(binary))
    if not path.exists():
        errors.append(f"Binary not found: {binary}")
    elif not path.is_file():
        errors.append(f"Not a file: {path}")
    elif not os.access(path, os.X_OK):
        errors.append(f"Not executable: {path}")
    return errors
