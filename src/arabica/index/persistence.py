"""Compressed on-disk form of the class index."""

from __future__ import annotations

import contextlib
import gzip
import json
import os
import zlib
from pathlib import Path

from arabica.index.models import ClassIndex

INDEX_SCHEMA_VERSION = 1


class PersistenceError(Exception):
    """Raised when the index file cannot be written or read back."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(message)
        self.path = path
        self.message = message


class IndexSchemaUnsupportedError(PersistenceError):
    """Raised when the stored schema does not match the supported version."""

    def __init__(self, path: str, found: int, expected: int) -> None:
        super().__init__(path, f"index schema {found} is unsupported; expected {expected}")
        self.found = found
        self.expected = expected


def save_index(index: ClassIndex, path: Path, create_missing_dir: bool = True) -> None:
    """Write the index atomically; the previous file survives any failure."""
    payload = {"schema_version": INDEX_SCHEMA_VERSION, "classes": index.to_payload()}
    tmp = path.with_name(path.name + ".tmp")
    try:
        if create_missing_dir:
            path.parent.mkdir(parents=True, exist_ok=True)
        with gzip.open(tmp, "wt", encoding="utf-8") as handle:
            json.dump(payload, handle, sort_keys=True, separators=(",", ":"))
        os.replace(tmp, path)
    except OSError as error:
        with contextlib.suppress(OSError):
            tmp.unlink(missing_ok=True)
        raise PersistenceError(str(path), error.strerror or str(error)) from error


def load_index(path: Path) -> ClassIndex:
    """Read an index written by save_index."""
    try:
        with gzip.open(path, "rt", encoding="utf-8") as handle:
            payload = json.load(handle)
    except FileNotFoundError as error:
        raise PersistenceError(str(path), "file does not exist") from error
    except (OSError, EOFError, zlib.error, UnicodeDecodeError, ValueError) as error:
        raise PersistenceError(str(path), str(error) or type(error).__name__) from error

    if not isinstance(payload, dict):
        raise PersistenceError(str(path), "index payload must be an object")
    schema = payload.get("schema_version")
    if not isinstance(schema, int) or isinstance(schema, bool):
        raise IndexSchemaUnsupportedError(str(path), found=-1, expected=INDEX_SCHEMA_VERSION)
    if schema != INDEX_SCHEMA_VERSION:
        raise IndexSchemaUnsupportedError(str(path), found=schema, expected=INDEX_SCHEMA_VERSION)
    classes = payload.get("classes")
    if not isinstance(classes, dict):
        raise PersistenceError(str(path), "index classes must be an object")
    for short_name, full_names in classes.items():
        if not isinstance(full_names, list) or not all(
            isinstance(name, str) for name in full_names
        ):
            raise PersistenceError(str(path), f"entry {short_name!r} must be a list of strings")
    try:
        return ClassIndex.from_payload(classes)
    except ValueError as error:
        raise PersistenceError(str(path), str(error)) from error
