# src/task_tracker/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root": it turns settings into a ready-to-use
TaskStore (directories created, schema ensured) that the entry point passes
explicitly to the command handlers.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..config import Settings
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def resolve_db_path(settings: Settings, override: str | Path | None = None) -> Path:
    """The --db flag wins over TASK_DB_PATH / the data-dir default."""
    if override:
        return Path(override).expanduser()
    return settings.db_path


def open_task_store(db_path: str | Path) -> TaskStore:
    """
    Open the store and make sure the task table exists.

    Raises SchemaError (fatal) before any command can run.
    """
    store = TaskStore.open(db_path)
    try:
        store.ensure_schema()
        logger.info("TaskStore ready db=%s total=%s", db_path, store.count_tasks())
    except Exception:
        store.close()
        raise
    return store
