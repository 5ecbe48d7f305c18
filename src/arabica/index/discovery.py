"""Archive discovery below the working directory."""

from __future__ import annotations

import os
import stat
from pathlib import Path

from arabica.config import DEFAULT_ARCHIVE_SUFFIXES


class DiscoveryError(Exception):
    """Raised when a directory under the walk root cannot be listed."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(message)
        self.path = path
        self.message = message


def find_archives(
    root: Path,
    archive_suffixes: tuple[str, ...] = DEFAULT_ARCHIVE_SUFFIXES,
) -> list[Path]:
    """Collect non-hidden archives, never descending into hidden directories."""
    archives: list[Path] = []
    stack: list[Path] = [root]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as entries:
                ordered_entries = sorted(entries, key=lambda item: item.name)
        except OSError as error:
            raise DiscoveryError(str(current), error.strerror or str(error)) from error
        directories: list[Path] = []
        for entry in ordered_entries:
            if is_hidden_entry(entry):
                continue
            if entry.is_dir(follow_symlinks=False):
                directories.append(Path(entry.path))
                continue
            if not entry.is_file():
                continue
            if entry.name.endswith(archive_suffixes):
                archives.append(Path(entry.path))
        stack.extend(reversed(directories))
    return archives


def is_hidden_entry(entry: os.DirEntry[str]) -> bool:
    """Dot-prefixed names, plus the hidden attribute where the platform has one."""
    if entry.name.startswith("."):
        return True
    if os.name != "nt":
        return False
    try:
        attributes = entry.stat(follow_symlinks=False).st_file_attributes
    except OSError:
        return False
    return bool(attributes & stat.FILE_ATTRIBUTE_HIDDEN)
