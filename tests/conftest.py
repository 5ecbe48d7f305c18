from __future__ import annotations

import zipfile
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from arabica.project import CommandResult


def write_jar(path: Path, entries: Sequence[str]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as archive:
        for name in entries:
            archive.writestr(name, b"" if name.endswith("/") else b"\xca\xfe\xba\xbe")
    return path


@pytest.fixture
def make_jar() -> Callable[[Path, Sequence[str]], Path]:
    return write_jar


def not_a_repository(args: Sequence[str], cwd: Path) -> CommandResult:
    return CommandResult(
        args=tuple(args),
        returncode=128,
        stdout_lines=(),
        error=f"command {list(args)} exited with status=128",
    )


@pytest.fixture
def no_git() -> Callable[[Sequence[str], Path], CommandResult]:
    return not_a_repository
