"""Screen recording for Android devices via `adb shell screenrecord`."""

from .config.loader import load_settings
from .config.models import AdbSettings, RecordingOptions, Settings
from .recording import (
    AdbCommandError,
    DeleteError,
    PreflightError,
    PullError,
    Recording,
    RecordingError,
    Result,
    record_screen,
)

__all__ = [
    "record_screen",
    "Recording",
    "Result",
    "RecordingOptions",
    "AdbSettings",
    "Settings",
    "load_settings",
    "AdbCommandError",
    "PreflightError",
    "RecordingError",
    "PullError",
    "DeleteError",
]
