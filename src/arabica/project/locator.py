"""Locate the persisted index file for the enclosing repository."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from arabica.config import DEFAULT_DATABASE_FILENAME, DEFAULT_GIT_COMMAND
from arabica.project.commands import CommandRunner, run_command

STATE_DIR_NAME = ".git"


@dataclass(slots=True, frozen=True)
class DatabaseLocation:
    """Resolved index file path and how it was derived."""

    path: Path
    project_root: Path | None
    fallback: bool
    reason: str | None = None


def resolve_database_path(
    cwd: Path,
    git_command: Sequence[str] = DEFAULT_GIT_COMMAND,
    filename: str = DEFAULT_DATABASE_FILENAME,
    runner: CommandRunner = run_command,
) -> DatabaseLocation:
    """Return `<toplevel>/.git/<filename>`, or `<cwd>/.git/<filename>` when git cannot help."""
    result = runner([*git_command, "rev-parse", "--show-toplevel"], cwd)
    reason: str
    if not result.ok:
        reason = result.error or "git lookup failed"
    else:
        toplevel = result.stdout_lines[0].strip() if result.stdout_lines else ""
        if toplevel:
            root = Path(toplevel)
            return DatabaseLocation(
                path=root / STATE_DIR_NAME / filename,
                project_root=root,
                fallback=False,
            )
        reason = "git returned no top-level directory"

    return DatabaseLocation(
        path=cwd / STATE_DIR_NAME / filename,
        project_root=None,
        fallback=True,
        reason=reason,
    )
