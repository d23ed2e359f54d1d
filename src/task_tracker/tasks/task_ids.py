# src/task_tracker/tasks/task_ids.py

"""Client-side task id generation (no coordination with the store)."""

from __future__ import annotations

import secrets
from typing import Final

ID_ALPHABET: Final = "1234567890abcdef"
ID_LENGTH: Final = 8


def generate_id() -> str:
    """
    Return a fresh 8-character id drawn uniformly from ID_ALPHABET.

    Collisions are not checked here; the task table's primary key rejects them.
    """
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_LENGTH))


def is_valid_id(value: str) -> bool:
    return len(value) == ID_LENGTH and all(c in ID_ALPHABET for c in value)
