# tests/test_task_store.py

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from task_tracker.tasks.task_models import Task
from task_tracker.tasks.task_store import (
    DuplicateTaskNameError,
    SchemaError,
    TaskStore,
    TaskStoreError,
)


def test_new_task_defaults() -> None:
    task = Task.new("Buy milk")
    assert task.name == "Buy milk"
    assert task.done is False
    assert len(task.id) == 8


@pytest.mark.parametrize("name", ["", "   "])
def test_new_task_requires_name(name: str) -> None:
    with pytest.raises(ValueError):
        Task.new(name)


def test_save_then_get_by_id(store: TaskStore) -> None:
    task_id = store.save(Task.new("Task #1"))

    got = store.get_by_id(task_id)
    assert got is not None
    assert got.id == task_id
    assert got.name == "Task #1"
    assert got.done is False


def test_get_by_id_not_found(store: TaskStore) -> None:
    assert store.get_by_id("deadbeef") is None


def test_save_is_upsert_by_id(store: TaskStore) -> None:
    task = Task.new("Draft")
    store.save(task)

    task_id = store.save(Task(id=task.id, name="Final", done=True))
    assert task_id == task.id

    got = store.get_by_id(task.id)
    assert got == Task(id=task.id, name="Final", done=True)
    assert store.count_tasks() == 1


def test_duplicate_name_is_rejected(store: TaskStore) -> None:
    first = Task.new("Same")
    store.save(first)

    with pytest.raises(DuplicateTaskNameError) as exc_info:
        store.save(Task.new("Same"))

    assert exc_info.value.name == "Same"
    assert isinstance(exc_info.value, TaskStoreError)
    assert isinstance(exc_info.value.__cause__, sqlite3.IntegrityError)
    # no partial write
    assert [t.id for t in store.get_all()] == [first.id]


def test_upsert_onto_name_owned_by_other_id_fails(store: TaskStore) -> None:
    a = Task.new("A")
    b = Task.new("B")
    store.save(a)
    store.save(b)

    with pytest.raises(DuplicateTaskNameError):
        store.save(Task(id=b.id, name="A", done=False))

    got = store.get_by_id(b.id)
    assert got is not None
    assert got.name == "B"


def test_delete(store: TaskStore) -> None:
    task_id = store.save(Task.new("Task #1"))

    assert store.delete(task_id) is True
    assert store.get_by_id(task_id) is None
    assert store.get_all() == []


def test_complete_and_undo_are_idempotent(store: TaskStore) -> None:
    task_id = store.save(Task.new("Task #1"))

    assert store.complete(task_id) is True
    assert store.complete(task_id) is True
    got = store.get_by_id(task_id)
    assert got is not None and got.done is True

    assert store.undo(task_id) is True
    assert store.undo(task_id) is True
    got = store.get_by_id(task_id)
    assert got is not None and got.done is False


def test_undo_saved_done_task(store: TaskStore) -> None:
    task_id = store.save(Task(id="12345678", name="Task #1", done=True))

    store.undo(task_id)

    got = store.get_by_id(task_id)
    assert got is not None and got.done is False


def test_mutations_on_unknown_id_are_noops(store: TaskStore) -> None:
    task_id = store.save(Task.new("Keep me"))

    assert store.complete("00000000") is False
    assert store.undo("00000000") is False
    assert store.delete("00000000") is False

    assert store.get_all() == [Task(id=task_id, name="Keep me", done=False)]


def test_get_all_returns_every_task(store: TaskStore) -> None:
    names = {"Banana", "Apple", "Cherry"}
    for name in names:
        store.save(Task.new(name))

    assert {t.name for t in store.get_all()} == names
    assert store.count_tasks() == 3


def test_ensure_schema_is_idempotent(store: TaskStore) -> None:
    task_id = store.save(Task.new("Survivor"))

    store.ensure_schema()
    store.ensure_schema()

    assert store.get_all() == [Task(id=task_id, name="Survivor", done=False)]


def test_data_persists_across_connections(tmp_path: Path) -> None:
    db = tmp_path / "nested" / "tasks.sqlite3"
    with TaskStore.open(db) as s:
        s.ensure_schema()
        task_id = s.save(Task.new("Persisted"))

    with TaskStore.open(db) as s:
        s.ensure_schema()
        got = s.get_by_id(task_id)

    assert got is not None
    assert got.name == "Persisted"


def test_in_memory_store() -> None:
    with TaskStore.open(":memory:") as s:
        s.ensure_schema()
        task_id = s.save(Task.new("Ephemeral"))
        assert s.get_by_id(task_id) is not None


def test_operations_before_schema_raise_store_error(tmp_path: Path) -> None:
    with TaskStore.open(tmp_path / "empty.sqlite3") as s:
        with pytest.raises(TaskStoreError):
            s.get_all()
        with pytest.raises(TaskStoreError):
            s.save(Task.new("No table"))


def test_ensure_schema_failure_is_schema_error(tmp_path: Path) -> None:
    db = tmp_path / "readonly.sqlite3"
    setup = sqlite3.connect(db)
    setup.execute("CREATE TABLE other (x INTEGER)")
    setup.commit()
    setup.close()

    s = TaskStore(sqlite3.connect(f"file:{db}?mode=ro", uri=True))
    try:
        with pytest.raises(SchemaError) as exc_info:
            s.ensure_schema()
    finally:
        s.close()

    assert isinstance(exc_info.value.__cause__, sqlite3.OperationalError)


def test_open_under_regular_file_raises_store_error(tmp_path: Path) -> None:
    afile = tmp_path / "afile"
    afile.write_text("", "utf-8")

    with pytest.raises(TaskStoreError) as exc_info:
        TaskStore.open(afile / "tasks.sqlite3")

    assert isinstance(exc_info.value.__cause__, OSError)


def test_null_name_is_not_reported_as_duplicate(store: TaskStore) -> None:
    with pytest.raises(TaskStoreError) as exc_info:
        store.save(Task(id="12345678", name=None))  # type: ignore[arg-type]

    assert not isinstance(exc_info.value, DuplicateTaskNameError)
    assert "NOT NULL" in str(exc_info.value)
    assert store.get_all() == []
