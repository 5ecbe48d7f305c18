"""Command keyword dispatch for the stdio loop."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

LineWriter = Callable[[str], None]
CommandHandler = Callable[[tuple[str, ...], LineWriter], dict[str, object]]


@dataclass(slots=True, frozen=True)
class CommandDispatchError(Exception):
    """Represents a command that was not carried out."""

    code: str
    message: str


@dataclass(slots=True)
class CommandRegistry:
    """Command keyword -> handler; unknown keywords are dispatch errors."""

    _handlers: dict[str, CommandHandler] = field(default_factory=dict)

    def register(self, name: str, handler: CommandHandler) -> None:
        """Register a named handler."""
        self._handlers[name] = handler

    def dispatch(
        self, name: str, arguments: tuple[str, ...], write_line: LineWriter
    ) -> dict[str, object]:
        """Run a command's handler and return its summary for the audit log."""
        handler = self._handlers.get(name)
        if handler is None:
            raise CommandDispatchError(code="UNKNOWN_COMMAND", message=f"Unknown command: {name}")
        return handler(arguments, write_line)
