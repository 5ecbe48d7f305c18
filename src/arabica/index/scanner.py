"""Extract fully-qualified class names from jar archives."""

from __future__ import annotations

import zipfile
from collections.abc import Iterator
from pathlib import Path

from arabica.config import DEFAULT_CLASS_SUFFIX
from arabica.index.models import ClassIndex


class ArchiveScanError(Exception):
    """Raised when an archive cannot be opened or read."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(message)
        self.path = path
        self.message = message


def class_name_from_entry(entry_name: str, class_suffix: str = DEFAULT_CLASS_SUFFIX) -> str | None:
    """Map `a/b/C.class` to `a.b.C`; None for entries that are not class files."""
    if not entry_name.endswith(class_suffix):
        return None
    return entry_name[: -len(class_suffix)].replace("/", ".")


def iter_class_names(
    path: str | Path, class_suffix: str = DEFAULT_CLASS_SUFFIX
) -> Iterator[str]:
    """Yield class names for every class-file entry of an archive."""
    try:
        with zipfile.ZipFile(path) as archive:
            names = archive.namelist()
    except (OSError, zipfile.BadZipFile) as error:
        raise ArchiveScanError(str(path), _describe(error)) from error
    for entry_name in names:
        if entry_name.endswith("/"):
            continue
        full_name = class_name_from_entry(entry_name, class_suffix)
        if full_name is not None:
            yield full_name


def index_archive(
    index: ClassIndex, path: str | Path, class_suffix: str = DEFAULT_CLASS_SUFFIX
) -> int:
    """Add every class of an archive to the index; return how many were new."""
    added = 0
    for full_name in iter_class_names(path, class_suffix):
        if index.add(full_name):
            added += 1
    return added


def _describe(error: BaseException) -> str:
    if isinstance(error, OSError) and error.strerror:
        return error.strerror if not error.filename else f"{error.strerror}: {error.filename}"
    return str(error) or type(error).__name__
