from __future__ import annotations

import json
import os
import threading
from collections.abc import Mapping, MutableMapping
from pathlib import Path
from typing import Any

import structlog
from structlog.contextvars import merge_contextvars

# JSON-lines copy of every record; None keeps logs off the filesystem
_log_file: Path | None = None
_file_lock = threading.RLock()


def _level_from_env() -> int:
    """Get log level from ADBRECORD_LOG_LEVEL (TRACE|DEBUG|INFO|WARNING|ERROR)."""
    import logging

    raw = os.getenv("ADBRECORD_LOG_LEVEL", "INFO").upper()
    if raw == "TRACE":
        return 5
    return getattr(logging, raw, logging.INFO)


def _omit_unset(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> Mapping[str, Any]:
    # Options such as serial or pid are often None; keep records short
    return {k: v for k, v in event_dict.items() if v is not None}


def _append_to_log_file(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    path = _log_file
    if path is None:
        return event_dict

    line = json.dumps(event_dict, ensure_ascii=False, default=str)
    with _file_lock:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as f:
            f.write(line + "\n")
    return event_dict


def setup_logging(
    *,
    level: int | None = None,
    log_file: str | os.PathLike[str] | None = None,
) -> None:
    """
    Configure structlog for JSON output on stdout.

    The library never calls this itself: until an application does, adbrecord
    logs through structlog's default configuration and writes no files.

    Args:
        level: Minimum level; defaults to ADBRECORD_LOG_LEVEL, else INFO.
        log_file: Also append each record as a JSON line to this file.
            Defaults to ADBRECORD_LOG_FILE; unset means no file.
    """
    import logging

    global _log_file

    if level is None:
        level = _level_from_env()
    if log_file is None:
        log_file = os.getenv("ADBRECORD_LOG_FILE") or None
    _log_file = Path(log_file) if log_file else None

    structlog.configure(
        processors=[
            merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
            structlog.processors.CallsiteParameterAdder(
                [structlog.processors.CallsiteParameter.MODULE]
            ),
            structlog.processors.EventRenamer("message"),
            _omit_unset,
            _append_to_log_file,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.PrintLoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )

    logging.getLogger().setLevel(level)


def get_logger(name: str | None = None) -> Any:
    """Get a structlog logger; configuration is left to the application."""
    return structlog.get_logger(name or __name__)


__all__ = [
    "setup_logging",
    "get_logger",
]
