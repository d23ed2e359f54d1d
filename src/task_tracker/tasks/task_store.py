# src/task_tracker/tasks/task_store.py

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from .task_models import Task

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"


class TaskStoreError(Exception):
    """Any failure reported by the underlying SQLite database."""


class SchemaError(TaskStoreError):
    """The task table could not be created or verified."""


class DuplicateTaskNameError(TaskStoreError):
    def __init__(self, name: str) -> None:
        super().__init__(f"a task named {name!r} already exists")
        self.name = name


class TaskStore:
    """
    SQLite task store.

    Owns the single `task` table. The connection is passed in explicitly and
    used for every call; each public method is its own transaction
    (committed on success, rolled back on error).

    complete/undo/delete on an unknown id are no-ops. They return False so
    callers can tell, but never raise for it.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self._conn.row_factory = sqlite3.Row

    @classmethod
    def open(cls, db_path: str | Path) -> TaskStore:
        """Open a file-backed store (or an in-memory one for ":memory:")."""
        try:
            if str(db_path) != MEMORY_DB:
                Path(db_path).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(db_path))
        except (sqlite3.Error, OSError) as e:
            raise TaskStoreError(f"cannot open database {db_path}: {e}") from e
        logger.debug("Opened task database db=%s", db_path)
        return cls(conn)

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> TaskStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ---- low-level helpers ----

    def _execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        try:
            with self._conn:
                return self._conn.execute(sql, params)
        except sqlite3.Error as e:
            raise TaskStoreError(str(e)) from e

    def _query(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        try:
            return self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise TaskStoreError(str(e)) from e

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(id=str(row["id"]), name=str(row["name"]), done=bool(row["done"]))

    # ---- public API ----

    def ensure_schema(self) -> None:
        """Create the task table if missing. Safe on every start; never touches rows."""
        try:
            with self._conn:
                self._conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS task (
                        id TEXT PRIMARY KEY,
                        name TEXT NOT NULL UNIQUE,
                        done INTEGER DEFAULT 0 CHECK (done IN (0, 1))
                    )
                    """
                )
        except sqlite3.Error as e:
            raise SchemaError(f"cannot create task table: {e}") from e

    def count_tasks(self) -> int:
        ((n,),) = self._query("SELECT COUNT(*) FROM task")
        return int(n)

    def save(self, task: Task) -> str:
        """
        Upsert by id: insert a new row or overwrite name and done of an
        existing one. Returns the task id.

        Raises DuplicateTaskNameError when another id already owns the name.
        """
        try:
            with self._conn:
                self._conn.execute(
                    """
                    INSERT INTO task (id, name, done)
                    VALUES (?, ?, ?)
                    ON CONFLICT (id) DO UPDATE SET
                        name = excluded.name,
                        done = excluded.done
                    """,
                    (task.id, task.name, int(task.done)),
                )
        except sqlite3.IntegrityError as e:
            if "UNIQUE constraint failed: task.name" in str(e):
                raise DuplicateTaskNameError(task.name) from e
            raise TaskStoreError(str(e)) from e
        except sqlite3.Error as e:
            raise TaskStoreError(str(e)) from e

        logger.debug("Task saved id=%s done=%s", task.id, task.done)
        return task.id

    def get_by_id(self, task_id: str) -> Task | None:
        rows = self._query("SELECT id, name, done FROM task WHERE id = ?", (task_id,))
        return self._row_to_task(rows[0]) if rows else None

    def get_all(self) -> list[Task]:
        """Every task, in storage order."""
        return [self._row_to_task(r) for r in self._query("SELECT id, name, done FROM task")]

    def _set_done(self, task_id: str, done: bool) -> bool:
        cur = self._execute("UPDATE task SET done = ? WHERE id = ?", (int(done), task_id))
        found = cur.rowcount == 1
        if found:
            logger.debug("Task updated id=%s done=%s", task_id, done)
        else:
            logger.info("No task with id=%s, nothing to update", task_id)
        return found

    def complete(self, task_id: str) -> bool:
        return self._set_done(task_id, True)

    def undo(self, task_id: str) -> bool:
        return self._set_done(task_id, False)

    def delete(self, task_id: str) -> bool:
        cur = self._execute("DELETE FROM task WHERE id = ?", (task_id,))
        found = cur.rowcount == 1
        if found:
            logger.debug("Task deleted id=%s", task_id)
        else:
            logger.info("No task with id=%s, nothing to delete", task_id)
        return found
