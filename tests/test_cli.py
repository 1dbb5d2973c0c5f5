import signal
import sys
from pathlib import Path

import pytest
from PySide6.QtCore import QCoreApplication, QTimer

from wavwatch import cli


@pytest.mark.parametrize("argv", [
    ["-i", "in", "-o", "out"],
    ["--input-dir", "in", "--output-dir", "out"],
    ["in", "out"],
    ["-i", "in", "out"],
    ["-o", "out", "in"],
])
def test_flag_and_positional_forms(argv):
    args = cli.parse_args(argv)
    assert (args.input_dir, args.output_dir) == ("in", "out")


@pytest.mark.parametrize("argv", [
    [],
    ["in"],
    ["-i", "in"],
    ["-o", "out"],
    ["in", "out", "extra"],
    ["-i", "in", "-o", "out", "extra"],
    ["in", "out", "--max-pending", "-3"],
    ["in", "out", "--overflow", "block"],
])
def test_bad_arguments_print_usage_and_exit_2(argv, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.parse_args(argv)
    assert exc.value.code == 2
    assert "usage:" in capsys.readouterr().err


def test_version(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.parse_args(["--version"])
    assert exc.value.code == 0
    assert "wavwatch" in capsys.readouterr().out


def test_options_reach_settings():
    args = cli.parse_args(["in", "out", "--ffmpeg", "/opt/ffmpeg", "--log-level", "debug",
                           "--max-pending", "5", "--overflow", "drop-oldest"])
    s = cli.settings_from_args(args)
    assert s.input_dir == Path("in")
    assert s.ffmpeg_bin == "/opt/ffmpeg"
    assert s.log_level == "DEBUG"
    assert s.max_pending == 5
    assert s.overflow == "drop-oldest"


def test_missing_input_dir_exits_1(tmp_path, monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)
    code = cli.main(["-i", str(tmp_path / "absent"), "-o", str(tmp_path / "out")])
    assert code == 1


def test_bad_config_file_exits_2(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["in", "out", "--config", str(tmp_path / "missing.json")])
    assert exc.value.code == 2
    assert "Settings file not found" in capsys.readouterr().err


def test_output_dir_that_is_a_file_exits_1(tmp_path, monkeypatch, caplog):
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)
    (tmp_path / "in").mkdir()
    taken = tmp_path / "out"
    taken.write_text("not a directory")

    code = cli.main(["-i", str(tmp_path / "in"), "-o", str(taken)])

    assert code == 1
    assert "Cannot use output directory" in caplog.text


@pytest.fixture
def restore_signal_handlers():
    saved = {s: signal.getsignal(s) for s in (signal.SIGINT, signal.SIGTERM)}
    yield
    for s, handler in saved.items():
        signal.signal(s, handler)


@pytest.fixture
def exec_guard():
    """Bail out of a hung event loop with a code no test expects."""
    guard = QTimer()
    guard.setSingleShot(True)
    guard.timeout.connect(lambda: QCoreApplication.exit(99))
    guard.start(15000)
    yield
    guard.stop()


@pytest.fixture
def running_dirs(tmp_path, monkeypatch, exec_guard):
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)
    (tmp_path / "in").mkdir()
    return ["-i", str(tmp_path / "in"), "-o", str(tmp_path / "out")]


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals")
def test_sigint_shuts_down_cleanly(running_dirs, restore_signal_handlers, caplog):
    QTimer.singleShot(300, lambda: signal.raise_signal(signal.SIGINT))

    code = cli.main(running_dirs)

    assert code == 0
    assert "Received SIGINT" in caplog.text
    assert "Shutting down" in caplog.text


def test_worker_dying_exits_1(running_dirs, restore_signal_handlers, monkeypatch, caplog):
    class QueueClosingSupervisor(cli.Supervisor):
        def start(self):
            super().start()
            self.queue.close()

    monkeypatch.setattr(cli, "Supervisor", QueueClosingSupervisor)

    code = cli.main(running_dirs)

    assert code == 1
    assert "Worker stopped unexpectedly" in caplog.text
