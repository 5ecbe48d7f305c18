"""Protocol command interfaces and registrations."""

from .registry import CommandDispatchError, CommandHandler, CommandRegistry, LineWriter

__all__ = ["CommandDispatchError", "CommandHandler", "CommandRegistry", "LineWriter"]
