"""Owns the process-wide class index and its persisted copy."""

from __future__ import annotations

import gc
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from arabica.config import IndexConfig
from arabica.index.models import ClassIndex, IndexProgress, MergeSummary
from arabica.index.persistence import PersistenceError, load_index, save_index
from arabica.index.scanner import ArchiveScanError, index_archive

ProgressReporter = Callable[[IndexProgress], None]


@dataclass(slots=True, frozen=True)
class IndexStatus:
    """Current index status snapshot."""

    database_path: str
    short_name_count: int
    class_count: int


@dataclass(slots=True, frozen=True)
class LoadResult:
    """Outcome of loading the persisted index at start-up."""

    ok: bool
    short_name_count: int
    error: str | None = None


class IndexManager:
    """Merges archives into the index, answers lookups and persists the result."""

    def __init__(
        self,
        database_path: Path,
        index_config: IndexConfig,
        create_missing_dir: bool = True,
        work_dir: Path | None = None,
    ) -> None:
        self._database_path = database_path
        self._work_dir = work_dir
        self._index_config = index_config
        self._create_missing_dir = create_missing_dir
        self._index = ClassIndex()

    @property
    def database_path(self) -> Path:
        return self._database_path

    @property
    def index(self) -> ClassIndex:
        return self._index

    def load(self) -> LoadResult:
        """Replace the index with the persisted copy, or an empty one on failure."""
        try:
            self._index = load_index(self._database_path)
        except PersistenceError as error:
            self._index = ClassIndex()
            return LoadResult(ok=False, short_name_count=0, error=error.message)
        return LoadResult(ok=True, short_name_count=len(self._index))

    def save(self) -> None:
        save_index(self._index, self._database_path, self._create_missing_dir)

    def merge(self, paths: Sequence[str], report: ProgressReporter) -> MergeSummary:
        """Scan every archive, tolerating per-archive failures, then persist."""
        started = time.perf_counter()
        total = len(paths)
        indexed = 0
        failed = 0
        added = 0
        for position, path in enumerate(paths, start=1):
            try:
                added += index_archive(
                    self._index, self._resolve(path), self._index_config.class_suffix
                )
            except ArchiveScanError as error:
                failed += 1
                report(
                    IndexProgress(position=position, total=total, path=path, error=error.message)
                )
                continue
            indexed += 1
            report(IndexProgress(position=position, total=total, path=path))

        save_error: str | None = None
        try:
            self.save()
        except PersistenceError as error:
            save_error = error.message
        # hint only
        gc.collect()
        return MergeSummary(
            total=total,
            indexed=indexed,
            failed=failed,
            added_classes=added,
            duration_ms=int((time.perf_counter() - started) * 1000),
            save_error=save_error,
        )

    def lookup(self, short_name: str) -> tuple[str, ...]:
        return self._index.lookup(short_name)

    def status(self) -> IndexStatus:
        return IndexStatus(
            database_path=str(self._database_path),
            short_name_count=len(self._index),
            class_count=self._index.class_count(),
        )

    def _resolve(self, path: str) -> Path:
        if self._work_dir is None:
            return Path(path)
        return self._work_dir / path
