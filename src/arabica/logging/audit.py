"""Structured JSONL audit log utilities."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path


@dataclass(slots=True, frozen=True)
class AuditEvent:
    """Sanitized representation of a single handled command line."""

    timestamp: str
    command: str
    ok: bool
    error_code: str | None
    duration_ms: int
    metadata: dict[str, object]


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sanitize_arguments(command: str, arguments: tuple[str, ...]) -> dict[str, object]:
    """Describe command arguments without recording paths or names verbatim."""
    if command == "index":
        return {"explicit_paths": len(arguments)}
    if command == "select":
        if not arguments:
            return {"name_present": False}
        return {"name_present": True, "name_length": len(arguments[0])}
    return {"argument_count": len(arguments)}


class JsonlAuditLogger:
    """Append-only JSONL audit log living beside the index database.

    The logger never creates directories. Until the database directory
    exists, events are dropped.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        """Return on-disk JSONL path."""
        return self._path

    def append(self, event: AuditEvent) -> bool:
        """Append a sanitized event as one JSON object per line; False if dropped."""
        if not self._path.parent.is_dir():
            return False
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(asdict(event), sort_keys=True))
            handle.write("\n")
        return True
