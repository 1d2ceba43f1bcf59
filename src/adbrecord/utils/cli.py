from __future__ import annotations

import subprocess
from collections.abc import Sequence
from typing import Any


def _to_text(data: str | bytes | bytearray | None) -> str:
    if isinstance(data, bytes | bytearray):
        return data.decode(errors="replace")
    return data or ""


class Completed:
    """
    Wrapper around subprocess.CompletedProcess that decodes stdout and stderr into strings.
    """

    def __init__(self, proc: subprocess.CompletedProcess):
        """
        Initialize a Completed object based on subprocess.CompletedProcess.

        Args:
            proc (subprocess.CompletedProcess): The completed process instance.
        """
        self.args = list(proc.args)
        self.returncode = proc.returncode
        self.stdout = _to_text(proc.stdout)
        self.stderr = _to_text(proc.stderr)


def run_cmd(
    args: Sequence[str],
    *,
    check: bool = True,
    timeout: float | None = None,
) -> Completed:
    """
    Execute a command and wait for it to finish.

    Args:
        args (Sequence[str]): Command and arguments to execute.
        check (bool): If True, raise CalledProcessError on failure.
        timeout (float | None): Optional timeout in seconds for waiting for completion.

    Returns:
        Completed: Result with stdout/stderr as strings.

    Raises:
        subprocess.CalledProcessError: If `check=True` and process exits with a nonzero code.
        subprocess.TimeoutExpired: If the process does not finish within `timeout`.
        OSError: If the executable cannot be started (e.g. FileNotFoundError).
    """
    proc = subprocess.run(list(args), capture_output=True, timeout=timeout, check=False)

    if check and proc.returncode != 0:
        raise subprocess.CalledProcessError(
            proc.returncode, list(args), _to_text(proc.stdout), _to_text(proc.stderr)
        )

    return Completed(proc)


def spawn_cmd(args: Sequence[str]) -> subprocess.Popen[Any]:
    """
    Start a command asynchronously with captured text output.

    The caller owns the returned process and must collect it with `communicate()`.
    """
    return subprocess.Popen(
        list(args),
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        errors="replace",
    )
