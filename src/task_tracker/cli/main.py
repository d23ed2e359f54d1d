# src/task_tracker/cli/main.py

"""
CLI entrypoint.

Parses one sub-command, initializes logging, opens the task database once,
runs the command and prints its output on stdout.

Exit codes: 0 ok, 1 storage failure, 2 usage error.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence

from ..config import Settings, get_settings
from ..logging_setup import setup_logging
from ..tasks.task_store import TaskStoreError
from .bootstrap import open_task_store, resolve_db_path
from .commands import CommandError, registry

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_STORE_ERROR = 1
EXIT_USAGE = 2

# Global options that consume the following token.
_OPTIONS_WITH_VALUE = {"--db"}
_FLAGS = {"-h", "--help", "-v", "--verbose"}


def _find_command(argv: Sequence[str]) -> str | None:
    """
    First positional token of argv, skipping global options and their values.

    Returns None on any other option so argparse reports it.
    """
    it = iter(argv)
    for tok in it:
        if tok in _OPTIONS_WITH_VALUE:
            next(it, None)
            continue
        if tok in _FLAGS or tok.startswith("--db="):
            continue
        if tok.startswith("-"):
            return None
        return tok
    return None


def main(argv: Sequence[str] | None = None, *, settings: Settings | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    if settings is None:
        settings = get_settings()

    parser = registry.build_parser(prog=settings.app_name)

    command = _find_command(argv)
    if command is not None and command not in registry:
        # Unknown sub-commands are accepted and ignored.
        print("Invalid subcommand")
        return EXIT_OK

    args = parser.parse_args(list(argv))
    if args.command is None:
        parser.print_help(sys.stderr)
        return EXIT_USAGE

    console_level = logging.DEBUG if args.verbose else settings.console_log_level
    setup_logging(
        log_dir=settings.data_dir if settings.log_to_file else None,
        console_level=console_level,
    )

    db_path = resolve_db_path(settings, args.db)
    try:
        store = open_task_store(db_path)
    except TaskStoreError as e:
        logger.debug("Failed to open task database %s", db_path, exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return EXIT_STORE_ERROR

    with store:
        try:
            output = registry.handle(store, args)
        except CommandError as e:
            parser.print_usage(sys.stderr)
            print(f"{parser.prog}: error: {e}", file=sys.stderr)
            return EXIT_USAGE
        except TaskStoreError as e:
            logger.debug("Command %s failed", args.command, exc_info=True)
            print(f"error: {e}", file=sys.stderr)
            return EXIT_STORE_ERROR

    print(output)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
