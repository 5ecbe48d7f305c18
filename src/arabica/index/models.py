"""Typed models for the class name index."""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass


def short_name_of(full_name: str) -> str:
    """Return the text after the last dot, or the whole name."""
    return full_name.rpartition(".")[2]


class ClassIndex:
    """Short class name -> sorted, duplicate-free fully-qualified names."""

    def __init__(self) -> None:
        self._classes: dict[str, list[str]] = {}

    def add(self, full_name: str) -> bool:
        """Insert a fully-qualified name; return False when already known."""
        short_name = short_name_of(full_name)
        names = self._classes.get(short_name)
        if names is None:
            self._classes[short_name] = [full_name]
            return True
        position = bisect_left(names, full_name)
        if position < len(names) and names[position] == full_name:
            return False
        names.insert(position, full_name)
        return True

    def lookup(self, short_name: str) -> tuple[str, ...]:
        """Exact-match lookup; empty when the short name is unknown."""
        return tuple(self._classes.get(short_name, ()))

    def short_names(self) -> tuple[str, ...]:
        return tuple(sorted(self._classes))

    def class_count(self) -> int:
        return sum(len(names) for names in self._classes.values())

    def to_payload(self) -> dict[str, list[str]]:
        """Return a JSON-ready mapping with sorted keys."""
        return {key: list(self._classes[key]) for key in sorted(self._classes)}

    @classmethod
    def from_payload(cls, payload: Mapping[str, Sequence[str]]) -> ClassIndex:
        """Rebuild an index; names not matching their key are rejected."""
        index = cls()
        for short_name, full_names in payload.items():
            for full_name in full_names:
                if short_name_of(full_name) != short_name:
                    raise ValueError(f"class {full_name!r} does not belong under {short_name!r}")
                index.add(full_name)
        return index

    def __len__(self) -> int:
        return len(self._classes)

    def __iter__(self) -> Iterator[str]:
        return iter(self.short_names())

    def __contains__(self, short_name: object) -> bool:
        return short_name in self._classes

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ClassIndex):
            return NotImplemented
        return self._classes == other._classes

    def __repr__(self) -> str:
        return f"ClassIndex(short_names={len(self)}, classes={self.class_count()})"


@dataclass(slots=True, frozen=True)
class IndexProgress:
    """One per-archive progress report during a merge."""

    position: int
    total: int
    path: str
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True, frozen=True)
class MergeSummary:
    """Outcome of one merge over a list of archives."""

    total: int
    indexed: int
    failed: int
    added_classes: int
    duration_ms: int
    save_error: str | None = None
