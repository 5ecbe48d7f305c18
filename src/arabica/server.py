"""STDIO command loop entrypoint."""

from __future__ import annotations

import argparse
import sys
import time
from enum import Enum
from pathlib import Path
from typing import TextIO

from arabica.commands import CommandDispatchError, CommandRegistry
from arabica.commands.builtin import register_builtin_commands
from arabica.config import ArabicaConfig, CliOverrides, load_effective_config
from arabica.index import IndexManager, LoadResult
from arabica.logging import AuditEvent, JsonlAuditLogger, sanitize_arguments, utc_timestamp
from arabica.project import CommandRunner, DatabaseLocation, resolve_database_path, run_command

AUDIT_LOG_FILENAME = "arabica.audit.jsonl"
EXIT_COMMAND = "exit"


class LoopState(Enum):
    """Command loop states."""

    RUNNING = "running"
    TERMINATED = "terminated"


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for process startup configuration."""
    parser = argparse.ArgumentParser(prog="arabica")
    parser.add_argument("--database", required=False, default=None)
    parser.add_argument("--config", required=False, default=None)
    parser.add_argument("--no-audit", action="store_true", default=False)
    return parser


class StdioServer:
    """Line-oriented command loop over a single in-memory class index."""

    def __init__(
        self,
        config: ArabicaConfig,
        runner: CommandRunner = run_command,
        err_stream: TextIO | None = None,
    ) -> None:
        self._config = config
        self._err_stream = err_stream if err_stream is not None else sys.stderr
        self._location = self._locate_database(runner)
        if self._location.fallback:
            self._report_error(f"{self._location.reason}; storing index at {self._location.path}")
        self._index_manager = IndexManager(
            database_path=self._location.path,
            index_config=config.index,
            create_missing_dir=config.database.create_missing_dir,
            work_dir=config.work_dir,
        )
        self._audit_logger: JsonlAuditLogger | None = None
        if config.audit.enabled:
            self._audit_logger = JsonlAuditLogger(self._location.path.parent / AUDIT_LOG_FILENAME)
        self._registry = CommandRegistry()
        register_builtin_commands(
            self._registry,
            work_dir=config.work_dir,
            index_config=config.index,
            merge_archives=self._index_manager.merge,
            lookup_classes=self._index_manager.lookup,
            database_path=self._location.path,
        )

    @property
    def database_location(self) -> DatabaseLocation:
        return self._location

    @property
    def index_manager(self) -> IndexManager:
        return self._index_manager

    @property
    def audit_logger(self) -> JsonlAuditLogger | None:
        return self._audit_logger

    def load(self) -> LoadResult:
        """Load the persisted index; failures leave an empty index."""
        result = self._index_manager.load()
        if not result.ok:
            self._report_error(f"error reading {self._location.path}: {result.error}")
        return result

    def serve(self, in_stream: TextIO, out_stream: TextIO) -> LoopState:
        """Process commands until `exit` or end of input."""
        for raw_line in in_stream:
            if self.handle_line(raw_line, out_stream) is LoopState.TERMINATED:
                break
        return LoopState.TERMINATED

    def handle_line(self, raw_line: str, out_stream: TextIO) -> LoopState:
        """Handle a single protocol line."""
        line = raw_line.strip()
        if not line:
            return LoopState.RUNNING
        if line == EXIT_COMMAND:
            return LoopState.TERMINATED

        command, *rest = line.split()
        arguments = tuple(rest)
        started = time.perf_counter()

        def write_line(text: str) -> None:
            out_stream.write(f"{text}\n")
            out_stream.flush()

        try:
            outcome = self._registry.dispatch(command, arguments, write_line)
        except CommandDispatchError as error:
            self.log_command(command, arguments, started, error_code=error.code)
            return LoopState.RUNNING
        except Exception as error:
            self._report_error(f"internal error: {error}")
            self.log_command(command, arguments, started, error_code="INTERNAL_ERROR")
            return LoopState.RUNNING
        self.log_command(command, arguments, started, error_code=None, outcome=outcome)
        return LoopState.RUNNING

    def log_command(
        self,
        command: str,
        arguments: tuple[str, ...],
        started: float,
        error_code: str | None,
        outcome: dict[str, object] | None = None,
    ) -> None:
        """Log one sanitized command event, including the handler's summary."""
        if self._audit_logger is None:
            return
        event = AuditEvent(
            timestamp=utc_timestamp(),
            command=command,
            ok=error_code is None,
            error_code=error_code,
            duration_ms=int((time.perf_counter() - started) * 1000),
            metadata={**sanitize_arguments(command, arguments), **(outcome or {})},
        )
        try:
            self._audit_logger.append(event)
        except OSError as error:
            self._report_error(f"error writing {self._audit_logger.path}: {error}")

    def _locate_database(self, runner: CommandRunner) -> DatabaseLocation:
        if self._config.database_path is not None:
            return DatabaseLocation(
                path=self._config.database_path,
                project_root=None,
                fallback=False,
            )
        return resolve_database_path(
            self._config.work_dir,
            git_command=self._config.project.git_command,
            filename=self._config.database.filename,
            runner=runner,
        )

    def _report_error(self, message: str) -> None:
        self._err_stream.write(f"{message}\n")
        self._err_stream.flush()


def create_server(
    work_dir: str | Path = ".",
    cli_overrides: CliOverrides | None = None,
    runner: CommandRunner = run_command,
    err_stream: TextIO | None = None,
) -> StdioServer:
    """Create a configured server with the persisted index loaded."""
    config = load_effective_config(work_dir=Path(work_dir).resolve(), overrides=cli_overrides)
    server = StdioServer(config=config, runner=runner, err_stream=err_stream)
    server.load()
    return server


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the arabica process."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    overrides = CliOverrides(
        database_path=Path(args.database).resolve() if args.database is not None else None,
        config_path=Path(args.config).resolve() if args.config is not None else None,
        audit_enabled=False if args.no_audit else None,
    )
    for stream in (sys.stdin, sys.stdout):
        if hasattr(stream, "reconfigure"):
            stream.reconfigure(encoding="utf-8")
    server = create_server(work_dir=Path.cwd(), cli_overrides=overrides)
    server.serve(in_stream=sys.stdin, out_stream=sys.stdout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
