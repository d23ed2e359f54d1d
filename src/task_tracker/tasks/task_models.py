# src/task_tracker/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass

from .task_ids import generate_id


@dataclass(slots=True)
class Task:
    id: str
    name: str
    done: bool = False

    @classmethod
    def new(cls, name: str) -> Task:
        """Build a brand-new, not yet persisted task with a generated id."""
        if not name or not name.strip():
            raise ValueError("task name is required")
        return cls(id=generate_id(), name=name, done=False)
