"""Project root and state file location."""

from .commands import CommandResult, CommandRunner, run_command
from .locator import STATE_DIR_NAME, DatabaseLocation, resolve_database_path

__all__ = [
    "CommandResult",
    "CommandRunner",
    "DatabaseLocation",
    "STATE_DIR_NAME",
    "resolve_database_path",
    "run_command",
]
