# tests/conftest.py

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from task_tracker.config import Settings
from task_tracker.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """
    Settings pointing at a per-test temporary directory.

    Built directly rather than via Settings.from_env() so a developer's
    .env or TASK_* variables cannot leak into the tests.
    """
    return Settings(
        app_name="task",
        log_level="WARNING",
        log_to_file=False,
        data_dir=tmp_path,
        db_path=tmp_path / "tasks.sqlite3",
    )


@pytest.fixture()
def store(settings: Settings) -> Iterator[TaskStore]:
    """
    Real SQLite-backed store with the schema in place.

    NOTE: We use a real file database because storage behaviour (upsert,
    constraints) is exactly what these tests are about.
    """
    s = TaskStore.open(settings.db_path)
    s.ensure_schema()
    yield s
    s.close()


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """main() installs handlers on the root logger; drop them after each test."""
    root = logging.getLogger()
    before = list(root.handlers)
    yield
    for h in list(root.handlers):
        if h not in before:
            root.removeHandler(h)
            h.close()
