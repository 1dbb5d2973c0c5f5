import stat
import sys
import time
from pathlib import Path

import pytest
from PySide6.QtCore import QCoreApplication

FAKE_FFMPEG = """#!/bin/sh
# Stand-in for ffmpeg: fails like ffmpeg when the input is missing,
# otherwise writes its own argv (one per line) to the output path.
for last in "$@"; do :; done
if [ ! -f "$2" ]; then
    echo "$2: No such file or directory" >&2
    exit 1
fi
printf '%s\\n' "$@" > "$last"
exit 0
"""

SLOW_FFMPEG = """#!/bin/sh
exec sleep 30
"""

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="needs /bin/sh")


def _write_script(path: Path, body: str) -> Path:
    path.write_text(body)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def wait_for(predicate, timeout=5.0, interval=0.02):
    """Poll *predicate* until it is truthy or *timeout* seconds pass."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return bool(predicate())


def process_until(predicate, timeout=5.0):
    """Like wait_for, but keeps delivering queued Qt events while waiting."""
    def pump():
        QCoreApplication.processEvents()
        return predicate()
    return wait_for(pump, timeout)


@pytest.fixture(scope="session", autouse=True)
def qapp():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Never pick up the developer's real settings file."""
    monkeypatch.setattr(
        "wavwatch.config.default_settings_file",
        lambda: tmp_path / "no-such-config" / "settings.json",
    )


@pytest.fixture
def fake_ffmpeg(tmp_path):
    return _write_script(tmp_path / "fake-ffmpeg", FAKE_FFMPEG)


@pytest.fixture
def slow_ffmpeg(tmp_path):
    return _write_script(tmp_path / "slow-ffmpeg", SLOW_FFMPEG)


@pytest.fixture
def input_dir(tmp_path):
    d = tmp_path / "input"
    d.mkdir()
    return d


@pytest.fixture
def output_dir(tmp_path):
    d = tmp_path / "output"
    d.mkdir()
    return d
