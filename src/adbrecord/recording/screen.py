from __future__ import annotations

import os
import shlex
import signal
import subprocess
import threading
import time
from collections.abc import Mapping, Sequence
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any

from ..config.models import RecordingOptions, Settings
from ..utils.cli import Completed, run_cmd, spawn_cmd
from ..utils.logging import get_logger
from .args import (
    build_adb_args,
    build_delete_args,
    build_pull_args,
    build_screenrecord_args,
    remote_file_name,
    strip_progress,
)
from .errors import (
    AdbCommandError,
    DeleteError,
    PreflightError,
    PullError,
    RecordingError,
)

_log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Result:
    """Combined output of every adb call made for one recording."""

    stdout: str = ""
    stderr: str = ""

    def extend(self, stdout: str, stderr: str) -> Result:
        return Result(self.stdout + stdout, self.stderr + stderr)


class Recording:
    """
    Handle for a screen recording started by `record_screen`.

    `future` completes with a `Result` once the video has been pulled and the
    remote file removed, or fails with the first `AdbCommandError` raised.
    """

    def __init__(self, file_name: str, remote_file: str) -> None:
        self.file_name = file_name
        self.remote_file = remote_file
        self.future: Future[Result] = Future()
        self._proc: subprocess.Popen[Any] | None = None
        self._stop_requested = False
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._log = _log.bind(remote_file=remote_file, file=file_name)

    def stop(self) -> None:
        """
        Interrupt the running screenrecord process.

        Safe to call at any time and any number of times: it does nothing unless
        the recording step is in progress. Pull and delete still run afterwards.
        """
        with self._lock:
            proc = self._proc
            if proc is None or proc.poll() is not None:
                return
            self._stop_requested = True
            self._log.info("Stopping screen recording", action="record_stop", pid=proc.pid)
            proc.send_signal(signal.SIGINT)

    def result(self, timeout: float | None = None) -> Result:
        """Block until the recording finished and return its output, or raise its error."""
        return self.future.result(timeout)

    def done(self) -> bool:
        return self.future.done()

    @property
    def recording(self) -> bool:
        """True while the screenrecord process is running."""
        with self._lock:
            return self._proc is not None and self._proc.poll() is None

    # ------------------------
    # Internal steps
    # ------------------------
    def _fail(self, error: BaseException) -> Recording:
        self._log.error("Screen recording failed", action="record_failed", error=str(error))
        self.future.set_exception(error)
        return self

    def _start(self, cmd: Sequence[str], work: Any) -> None:
        self._log.info("Starting screen recording", action="record_start", cmd=shlex.join(cmd))
        self._proc = spawn_cmd(cmd)
        self._thread = threading.Thread(
            target=work, name=f"adbrecord-{self.remote_file}", daemon=True
        )
        self._thread.start()

    def _wait_for_recording(self, cmd: Sequence[str], preflight_stdout: str) -> Result:
        proc = self._proc
        assert proc is not None
        stdout, stderr = proc.communicate()
        with self._lock:
            self._proc = None
            stopped = self._stop_requested
        # An exit caused by our own SIGINT is the normal way to end a recording
        if proc.returncode != 0 and not stopped:
            raise RecordingError(cmd, proc.returncode, stdout or "", stderr or "")
        self._log.info(
            "Screen recording finished",
            action="record_done",
            returncode=proc.returncode,
            stopped=stopped,
        )
        return Result(preflight_stdout + (stdout or ""), stderr or "")


def _run_adb(
    cmd: Sequence[str], error_cls: type[AdbCommandError], *, timeout: float | None = None
) -> Completed:
    try:
        return run_cmd(cmd, timeout=timeout)
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as exc:
        raise error_cls.from_exception(cmd, exc) from exc


def _coerce_options(
    options: RecordingOptions | Mapping[str, Any] | None, settings: Settings
) -> RecordingOptions:
    if options is None:
        return settings.recording
    if isinstance(options, RecordingOptions):
        return options
    return RecordingOptions.model_validate(dict(options))


def record_screen(
    file_name: str | os.PathLike[str],
    options: RecordingOptions | Mapping[str, Any] | None = None,
    *,
    settings: Settings | None = None,
) -> Recording:
    """
    Record the device screen via `adb shell screenrecord` into `file_name`.

    `adb connect` (when `hostname` is set) and `adb wait-for-device` (when
    `wait_timeout` is nonzero) run before this function returns; their failure
    is reported through the returned handle's future as a `PreflightError`.
    Recording, pulling the video and removing it from the device then continue
    in the background until the time limit is reached or `stop()` is called.

    Args:
        file_name: Local output path; an existing file is overwritten.
        options: Recording options, as a model or a mapping (camelCase keys allowed).
            Defaults to the `recording` section of `settings`.
        settings: adb location and default options. Defaults to `Settings()`,
            which reads ADBRECORD_* environment variables.

    Returns:
        Recording: handle exposing `future`, `result()` and `stop()`.
    """
    settings = settings or Settings()
    opts = _coerce_options(options, settings)
    local_file = os.fspath(file_name)
    adb = settings.adb.path
    selectors = build_adb_args(opts)
    remote_file = remote_file_name()
    record_cmd = [adb, *selectors, *build_screenrecord_args(remote_file, opts)]

    recording = Recording(local_file, remote_file)
    log = recording._log

    connect_output = ""
    if opts.hostname:
        address = f"{opts.hostname}:{opts.port}"
        log.info("Connecting to device", action="adb_connect", address=address)
        try:
            connect_output = _run_adb([adb, "connect", address], PreflightError).stdout
        except PreflightError as e:
            return recording._fail(e)

    wait_output = ""
    if opts.wait_timeout:
        log.info("Waiting for device", action="adb_wait", timeout_ms=opts.wait_timeout)
        try:
            wait_output = _run_adb(
                [adb, *selectors, "wait-for-device"],
                PreflightError,
                timeout=opts.wait_timeout / 1000,
            ).stdout
        except PreflightError as e:
            return recording._fail(e)

    def _work() -> None:
        try:
            result = recording._wait_for_recording(record_cmd, connect_output + wait_output)
            # Pulling right after screenrecord exits can yield a truncated file
            time.sleep(opts.pull_delay / 1000)

            pull_cmd = [adb, *selectors, *build_pull_args(remote_file, local_file)]
            log.info("Pulling recording", action="pull", cmd=shlex.join(pull_cmd))
            pulled = _run_adb(pull_cmd, PullError)
            result = result.extend(strip_progress(pulled.stdout), pulled.stderr)

            delete_cmd = [adb, *selectors, *build_delete_args(remote_file)]
            log.info("Removing remote recording", action="delete")
            deleted = _run_adb(delete_cmd, DeleteError)
            result = result.extend(deleted.stdout, deleted.stderr)
        except Exception as e:
            recording._fail(e)
            return
        log.info("Screen recording saved", action="record_saved")
        recording.future.set_result(result)

    try:
        recording._start(record_cmd, _work)
    except OSError as e:
        return recording._fail(RecordingError.from_exception(record_cmd, e))
    return recording
