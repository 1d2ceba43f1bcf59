from __future__ import annotations

from collections.abc import Generator

import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_logging(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Start every test with structlog defaults and no log file."""
    monkeypatch.delenv("ADBRECORD_LOG_FILE", raising=False)
    monkeypatch.setattr("adbrecord.utils.logging._log_file", None)
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()
