from __future__ import annotations

import subprocess
import sys
from typing import Any

import pytest

from adbrecord.utils.cli import run_cmd, spawn_cmd


def test_run_cmd_success() -> None:
    """run_cmd should succeed and capture stdout as text on a successful command."""
    out = run_cmd(["/bin/echo", "hello"], check=True)
    assert out.returncode == 0
    assert out.stdout == "hello\n"
    assert out.stderr == ""


def test_run_cmd_error_check_true_raises() -> None:
    """When check=True and the command fails, run_cmd must raise CalledProcessError with text output."""
    with pytest.raises(subprocess.CalledProcessError) as ei:
        run_cmd(
            [sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"],
            check=True,
        )
    assert ei.value.returncode == 3
    assert ei.value.stderr == "boom"


def test_run_cmd_error_check_false_returns() -> None:
    out = run_cmd([sys.executable, "-c", "import sys; sys.exit(2)"], check=False)
    assert out.returncode == 2


def test_run_cmd_timeout() -> None:
    with pytest.raises(subprocess.TimeoutExpired):
        run_cmd([sys.executable, "-c", "import time; time.sleep(5)"], timeout=0.2)


def test_run_cmd_missing_executable() -> None:
    with pytest.raises(FileNotFoundError):
        run_cmd(["/nonexistent/adb", "devices"])


def test_spawn_cmd_pipes_text(monkeypatch: pytest.MonkeyPatch) -> None:
    """spawn_cmd should return the Popen instance with captured text pipes, without waiting."""
    spawned: dict[str, Any] = {}

    class DummyP:
        def __init__(self, args: list[str], **kwargs: Any) -> None:
            spawned["args"] = args
            spawned["kwargs"] = kwargs

    monkeypatch.setattr("adbrecord.utils.cli.subprocess.Popen", DummyP)
    p = spawn_cmd(["adb", "shell", "screenrecord", "/sdcard/Movies/a.mp4"])
    assert isinstance(p, DummyP)
    assert spawned["args"] == ["adb", "shell", "screenrecord", "/sdcard/Movies/a.mp4"]
    assert spawned["kwargs"]["stdout"] is subprocess.PIPE
    assert spawned["kwargs"]["stderr"] is subprocess.PIPE
    assert spawned["kwargs"]["text"] is True
