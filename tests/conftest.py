"""Pytest configuration for test isolation.

The CLI reads ``VIXUS_*`` settings and ``DATABASE_URL`` from the environment
(and from a ``.env`` in the working directory). A developer's shell or a stray
``.env`` would otherwise leak into assertions about defaults, so every test
runs with those variables cleared and from inside its own temporary
directory. Cached SQLAlchemy engines are disposed afterwards so SQLite files
from one test are never reused by the next, and the package logger installed
by CLI runs is removed so ``caplog`` sees records again.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from vixus.logging_setup import reset_logging

_ENV_VARS = ("DATABASE_URL", "VIXUS_LOG_FORMAT", "VIXUS_LOG_LEVEL", "VIXUS_MAX_BUCKETS")


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)

    yield

    from db.client import dispose_engines

    dispose_engines()
    reset_logging()
