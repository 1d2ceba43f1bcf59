from __future__ import annotations

import shlex
import subprocess
from collections.abc import Sequence


class AdbCommandError(Exception):
    """
    An adb invocation failed.

    Carries the command that was run, its exit status (None if the process
    could not be started or timed out) and the captured output, so callers can
    diagnose the failure without parsing adb's messages.
    """

    step = "adb"

    def __init__(
        self,
        cmd: Sequence[str],
        returncode: int | None = None,
        stdout: str = "",
        stderr: str = "",
        reason: str | None = None,
    ) -> None:
        self.cmd = list(cmd)
        self.returncode = returncode
        self.stdout = stdout or ""
        self.stderr = stderr or ""
        self.reason = reason
        super().__init__(self._describe())

    @property
    def command(self) -> str:
        """The failing command line, shell-quoted."""
        return shlex.join(self.cmd)

    def _describe(self) -> str:
        if self.reason:
            msg = f"{self.step} failed: {self.command}: {self.reason}"
        else:
            msg = f"{self.step} failed: {self.command} exited with status {self.returncode}"
        if self.stderr.strip():
            msg += f"\n{self.stderr.strip()}"
        return msg

    @classmethod
    def from_exception(cls, cmd: Sequence[str], exc: BaseException) -> AdbCommandError:
        """Build an error of this class from a subprocess-layer exception, chained to it."""
        error: AdbCommandError
        if isinstance(exc, subprocess.CalledProcessError):
            error = cls(cmd, exc.returncode, _text(exc.stdout), _text(exc.stderr))
        elif isinstance(exc, subprocess.TimeoutExpired):
            error = cls(
                cmd,
                None,
                _text(exc.stdout),
                _text(exc.stderr),
                reason=f"timed out after {exc.timeout:g}s",
            )
        else:
            error = cls(cmd, None, reason=str(exc))
        error.__cause__ = exc
        return error


class PreflightError(AdbCommandError):
    """`adb connect` or `adb wait-for-device` failed; recording never started."""

    step = "preflight"


class RecordingError(AdbCommandError):
    """screenrecord failed for a reason other than stop(); no video was retrieved."""

    step = "screenrecord"


class PullError(AdbCommandError):
    """The video could not be pulled; the remote file is still on the device."""

    step = "pull"


class DeleteError(AdbCommandError):
    """
    Removing the remote file failed.

    The local video was already retrieved at this point, so check the local
    file if that distinction matters.
    """

    step = "delete"


def _text(data: str | bytes | None) -> str:
    if isinstance(data, bytes | bytearray):
        return data.decode(errors="replace")
    return data or ""
