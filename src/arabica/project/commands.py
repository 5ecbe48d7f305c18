"""External command execution with a typed result."""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True, frozen=True)
class CommandResult:
    """Captured outcome of one external command."""

    args: tuple[str, ...]
    returncode: int | None
    stdout_lines: tuple[str, ...]
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.returncode == 0


CommandRunner = Callable[[Sequence[str], Path], CommandResult]


def run_command(args: Sequence[str], cwd: Path) -> CommandResult:
    """Run a command to completion; failures become results, never exceptions.

    Output is decoded as UTF-8; bytes that are not valid UTF-8 survive as
    surrogate escapes.
    """
    command = tuple(args)
    try:
        completed = subprocess.run(
            command,
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except (OSError, ValueError) as error:
        reason = error.strerror if isinstance(error, OSError) and error.strerror else error
        return CommandResult(
            args=command,
            returncode=None,
            stdout_lines=(),
            error=f"command {list(command)} could not be started: {reason}",
        )
    lines = tuple(completed.stdout.decode("utf-8", errors="surrogateescape").splitlines())
    if completed.returncode != 0:
        return CommandResult(
            args=command,
            returncode=completed.returncode,
            stdout_lines=lines,
            error=f"command {list(command)} exited with status={completed.returncode}",
        )
    return CommandResult(args=command, returncode=0, stdout_lines=lines)
