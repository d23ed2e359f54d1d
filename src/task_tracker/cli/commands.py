# src/task_tracker/cli/commands.py

from __future__ import annotations

import argparse
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from ..tasks.task_ids import is_valid_id
from ..tasks.task_models import Task
from ..tasks.task_store import TaskStore

CommandHandler = Callable[[TaskStore, argparse.Namespace], str]

logger = logging.getLogger(__name__)


class CommandError(Exception):
    """Bad user input detected after argument parsing (reported as a usage error)."""


@dataclass(frozen=True, slots=True)
class CommandSpec:
    name: str
    handler: CommandHandler
    help_text: str
    # (dest, metavar, help) of the single positional argument, if any.
    positional: tuple[str, str, str] | None = None


class CommandRegistry:
    """Sub-command registry: builds the argparse parser and dispatches parsed commands."""

    def __init__(self) -> None:
        self._commands: dict[str, CommandSpec] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        positional: tuple[str, str, str] | None = None,
    ) -> None:
        self._commands[name] = CommandSpec(name, handler, help_text, positional)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def names(self) -> list[str]:
        return list(self._commands)

    def build_parser(self, prog: str = "task") -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog=prog, description="task command module", allow_abbrev=False
        )
        parser.add_argument("--db", metavar="PATH", help="SQLite database file to use")
        parser.add_argument(
            "-v", "--verbose", action="store_true", help="show debug logs on stderr"
        )
        sub = parser.add_subparsers(dest="command", metavar="COMMAND")
        for spec in self._commands.values():
            p = sub.add_parser(spec.name, help=spec.help_text, description=spec.help_text)
            if spec.positional is not None:
                dest, metavar, arg_help = spec.positional
                p.add_argument(dest, metavar=metavar, help=arg_help)
        return parser

    def handle(self, store: TaskStore, args: argparse.Namespace) -> str:
        spec = self._commands.get(args.command)
        if spec is None:
            raise CommandError(f"unknown command: {args.command}")
        logger.debug("Running command %s", spec.name)
        return spec.handler(store, args)


# ---- display ----


def sort_for_display(tasks: Iterable[Task]) -> list[Task]:
    """Incomplete tasks first, then alphabetical by name (stable)."""
    return sorted(tasks, key=lambda t: (t.done, t.name))


def format_task(task: Task) -> str:
    mark = "X" if task.done else " "
    return f"[{mark}] {task.id} {task.name}"


def format_task_list(tasks: Iterable[Task]) -> str:
    return "\n".join(format_task(t) for t in sort_for_display(tasks))


# ---- handlers ----


def _check_id(task_id: str) -> None:
    if not is_valid_id(task_id):
        logger.warning("%r does not look like a task id", task_id)


def cmd_add(store: TaskStore, args: argparse.Namespace) -> str:
    try:
        task = Task.new(args.name)
    except ValueError as e:
        raise CommandError(str(e)) from e
    return store.save(task)


def cmd_del(store: TaskStore, args: argparse.Namespace) -> str:
    _check_id(args.id)
    store.delete(args.id)
    return args.id


def cmd_do(store: TaskStore, args: argparse.Namespace) -> str:
    _check_id(args.id)
    store.complete(args.id)
    return args.id


def cmd_undo(store: TaskStore, args: argparse.Namespace) -> str:
    _check_id(args.id)
    store.undo(args.id)
    return args.id


def cmd_list(store: TaskStore, args: argparse.Namespace) -> str:
    return format_task_list(store.get_all())


_ID_ARG = ("id", "ID", "The id of the task")

registry = CommandRegistry()
registry.register("add", cmd_add, "adds a task", ("name", "NAME", "The name of the task"))
registry.register("del", cmd_del, "deletes a task", _ID_ARG)
registry.register("do", cmd_do, "marks a task as complete", _ID_ARG)
registry.register("undo", cmd_undo, "marks a task as incomplete", _ID_ARG)
registry.register("list", cmd_list, "shows a list of tasks")
