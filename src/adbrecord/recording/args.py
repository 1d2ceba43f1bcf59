from __future__ import annotations

import re
import secrets

from ..config.models import RecordingOptions

REMOTE_DIR = "/sdcard/Movies"
MEDIA_SCANNER_ACTION = "android.intent.action.MEDIA_SCANNER_SCAN_FILE"

# Lines like "[ 42%] /sdcard/Movies/....mp4" printed by `adb pull`
_PROGRESS_LINE = re.compile(r"[^\n]+%.+?\n")


def build_adb_args(options: RecordingOptions) -> list[str]:
    """
    Build the device selector arguments prepended to every adb call.

    Both selectors are passed through when both are set; adb rejects the combination itself.
    """
    args: list[str] = []
    if options.serial:
        args += ["-s", options.serial]
    if options.transport_id:
        args += ["-t", options.transport_id]
    return args


def build_screenrecord_args(remote_file: str, options: RecordingOptions) -> list[str]:
    """
    Build the arguments for `adb shell screenrecord`.

    Args:
        remote_file (str): Video path on the device, passed as the last argument.
        options (RecordingOptions): Recording flags; each flag is added only if truthy.
    """
    args = ["shell", "screenrecord", "--verbose"]
    if options.bugreport:
        args.append("--bugreport")
    if options.size:
        args += ["--size", options.size]
    if options.bit_rate:
        args += ["--bit-rate", str(options.bit_rate)]
    if options.time_limit:
        args += ["--time-limit", str(options.time_limit)]
    args.append(remote_file)
    return args


def build_pull_args(remote_file: str, local_file: str) -> list[str]:
    return ["pull", "-a", remote_file, local_file]


def build_delete_args(remote_file: str) -> list[str]:
    """
    Remove the remote file and tell the media scanner about it, as one remote shell command.
    """
    cmd = f"rm {remote_file} && am broadcast -a {MEDIA_SCANNER_ACTION} -d file://{remote_file}"
    return ["shell", cmd]


def remote_file_name() -> str:
    """Return a fresh device path with a 128-bit random name."""
    return f"{REMOTE_DIR}/{secrets.token_hex(16)}.mp4"


def strip_progress(text: str) -> str:
    """Remove the transfer percentage lines from `adb pull` output."""
    return _PROGRESS_LINE.sub("", text)
