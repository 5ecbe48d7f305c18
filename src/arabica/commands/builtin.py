"""Built-in `index` and `select` commands."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

from arabica.commands.registry import (
    CommandDispatchError,
    CommandHandler,
    CommandRegistry,
    LineWriter,
)
from arabica.config import IndexConfig
from arabica.index import DiscoveryError, IndexProgress, MergeSummary, find_archives

MergeArchives = Callable[[Sequence[str], Callable[[IndexProgress], None]], MergeSummary]
LookupClasses = Callable[[str], tuple[str, ...]]


def register_builtin_commands(
    registry: CommandRegistry,
    work_dir: Path,
    index_config: IndexConfig,
    merge_archives: MergeArchives,
    lookup_classes: LookupClasses,
    database_path: Path,
) -> None:
    """Register the protocol's commands."""
    registry.register(
        "index",
        _index_handler(work_dir, index_config, merge_archives, database_path),
    )
    registry.register("select", _select_handler(lookup_classes))


def format_progress(progress: IndexProgress) -> str:
    """Render one `[i/total] index <path>` line."""
    line = f"[{progress.position}/{progress.total}] index {progress.path}"
    if progress.error is not None:
        return f"{line}: {progress.error}"
    return line


def _index_handler(
    work_dir: Path,
    index_config: IndexConfig,
    merge_archives: MergeArchives,
    database_path: Path,
) -> CommandHandler:
    def handler(arguments: tuple[str, ...], write_line: LineWriter) -> dict[str, object]:
        if not arguments:
            raise CommandDispatchError(
                code="INVALID_ARGUMENTS",
                message="index requires at least one archive path.",
            )
        try:
            discovered = find_archives(work_dir, index_config.archive_suffixes)
        except DiscoveryError as error:
            write_line(f"error indexing {error.path}: {error.message}")
            raise CommandDispatchError(code="DISCOVERY_FAILED", message=error.message) from error

        paths = [str(path) for path in discovered]
        paths.extend(arguments)
        write_line(str(len(paths)))

        def report(progress: IndexProgress) -> None:
            write_line(format_progress(progress))

        summary = merge_archives(paths, report)
        if summary.save_error is not None:
            write_line(f"error writing {database_path}: {summary.save_error}")
        return {
            "discovered": len(discovered),
            "explicit": len(arguments),
            "indexed": summary.indexed,
            "failed": summary.failed,
            "added_classes": summary.added_classes,
            "merge_ms": summary.duration_ms,
            "saved": summary.save_error is None,
        }

    return handler


def _select_handler(lookup_classes: LookupClasses) -> CommandHandler:
    def handler(arguments: tuple[str, ...], write_line: LineWriter) -> dict[str, object]:
        if not arguments:
            raise CommandDispatchError(
                code="INVALID_ARGUMENTS",
                message="select requires a class name.",
            )
        full_names = lookup_classes(arguments[0])
        write_line(" ".join(full_names))
        return {"matches": len(full_names)}

    return handler
