from .args import build_adb_args, build_screenrecord_args, remote_file_name, strip_progress
from .errors import AdbCommandError, DeleteError, PreflightError, PullError, RecordingError
from .screen import Recording, Result, record_screen

__all__ = [
    "record_screen",
    "Recording",
    "Result",
    "AdbCommandError",
    "PreflightError",
    "RecordingError",
    "PullError",
    "DeleteError",
    "build_adb_args",
    "build_screenrecord_args",
    "remote_file_name",
    "strip_progress",
]
