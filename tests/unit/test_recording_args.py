from __future__ import annotations

import re

from adbrecord.config.models import RecordingOptions
from adbrecord.recording.args import (
    build_adb_args,
    build_screenrecord_args,
    remote_file_name,
    strip_progress,
)

REMOTE = "/sdcard/Movies/video.mp4"


def test_adb_args_empty_by_default() -> None:
    assert build_adb_args(RecordingOptions()) == []


def test_adb_args_serial_then_transport_id() -> None:
    """Both selectors are passed through, serial first."""
    opts = RecordingOptions(serial="banana", transport_id="3")
    assert build_adb_args(opts) == ["-s", "banana", "-t", "3"]


def test_screenrecord_args_defaults() -> None:
    assert build_screenrecord_args(REMOTE, RecordingOptions()) == [
        "shell",
        "screenrecord",
        "--verbose",
        REMOTE,
    ]


def test_screenrecord_args_all_flags_in_fixed_order() -> None:
    opts = RecordingOptions(bugreport=True, size="720x1280", bit_rate=400, time_limit=9)
    assert build_screenrecord_args(REMOTE, opts) == [
        "shell",
        "screenrecord",
        "--verbose",
        "--bugreport",
        "--size",
        "720x1280",
        "--bit-rate",
        "400",
        "--time-limit",
        "9",
        REMOTE,
    ]


def test_screenrecord_args_skip_falsy_values() -> None:
    opts = RecordingOptions(bugreport=False, size="", bit_rate=0, time_limit=0)
    assert build_screenrecord_args(REMOTE, opts) == ["shell", "screenrecord", "--verbose", REMOTE]


def test_time_limit_not_capped() -> None:
    """Values above the device maximum are left for screenrecord to reject."""
    args = build_screenrecord_args(REMOTE, RecordingOptions(time_limit=600))
    assert args[-3:] == ["--time-limit", "600", REMOTE]


def test_remote_file_name_is_random_hex() -> None:
    names = {remote_file_name() for _ in range(50)}
    assert len(names) == 50
    for name in names:
        assert re.fullmatch(r"/sdcard/Movies/[0-9a-f]{32}\.mp4", name)


def test_strip_progress_removes_percentage_lines() -> None:
    out = (
        "[  0%] /sdcard/Movies/a.mp4\n"
        "[ 57%] /sdcard/Movies/a.mp4\n"
        "/sdcard/Movies/a.mp4: 1 file pulled, 0 skipped. 21.3 MB/s (1048576 bytes in 0.047s)\n"
    )
    assert strip_progress(out) == (
        "/sdcard/Movies/a.mp4: 1 file pulled, 0 skipped. 21.3 MB/s (1048576 bytes in 0.047s)\n"
    )


def test_strip_progress_keeps_plain_output() -> None:
    assert strip_progress("1 file pulled\n") == "1 file pulled\n"
    assert strip_progress("") == ""
