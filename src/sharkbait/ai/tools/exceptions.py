"""Exceptions raised by the tool calling system.

Every failure that crosses the registry boundary is a ``ToolError``. The
``code`` class attribute identifies the kind of failure and ``tool_name``
identifies the tool involved, so an orchestrator can decide whether to retry,
ask a human for confirmation, or abort the turn without inspecting messages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sharkbait.ai.tools.permissions.classifier import Classification, CommandRule

__all__ = [
    "BlockedCommandError",
    "DuplicateToolError",
    "IrreversibleActionError",
    "ToolError",
    "ToolExecutionError",
    "ToolNotFoundError",
    "ToolTimeoutError",
    "ToolValidationError",
]


class ToolError(Exception):
    """Base exception for tool registration and execution failures.

    Attributes:
        code: Machine-readable failure kind.
        tool_name: Name of the tool involved, if known.
    """

    code = "tool_error"

    def __init__(self, message: str, tool_name: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.tool_name = tool_name

    def __str__(self) -> str:
        if self.tool_name:
            return f"[{self.tool_name}] {self.message}"
        return self.message


class ToolNotFoundError(ToolError):
    """Raised when a tool name has no registered handler."""

    code = "unknown_tool"


class DuplicateToolError(ToolError):
    """Raised when explicitly registering a name that is already taken."""

    code = "duplicate_tool"


class ToolValidationError(ToolError):
    """Raised when a tool or its arguments fail validation.

    Covers malformed argument JSON from the model as well as arguments
    rejected by the tool's input schema.
    """

    code = "validation_error"


class ToolExecutionError(ToolError):
    """Raised when a tool handler fails while running."""

    code = "handler_failure"


class ToolTimeoutError(ToolExecutionError):
    """Raised when a tool exceeds its allotted execution time.

    Attributes:
        timeout: The limit that was exceeded, in seconds.
    """

    code = "timeout"

    def __init__(
        self, message: str, timeout: float, tool_name: str | None = None
    ) -> None:
        super().__init__(message, tool_name=tool_name)
        self.timeout = timeout


class BlockedCommandError(ToolError):
    """Raised when a command matches a hard-blocking rule.

    The command is refused outright. No confirmation step can allow it.

    Attributes:
        command: The refused command string.
        rule: The blocking rule that matched.
    """

    code = "blocked_command"

    def __init__(
        self,
        command: str,
        rule: CommandRule | None = None,
        tool_name: str | None = None,
    ) -> None:
        reason = f" ({rule.description})" if rule is not None else ""
        super().__init__(
            f"Command refused outright: matches a blocked pattern{reason}.\n"
            f"Command: {command}",
            tool_name=tool_name,
        )
        self.command = command
        self.rule = rule


class IrreversibleActionError(ToolError):
    """Raised when a command is classified irreversible but not hard-blocked.

    The command is refused pending an explicit confirmation step outside
    this core.

    Attributes:
        command: The refused command string.
        classification: The classification that triggered the refusal.
    """

    code = "irreversible_action"

    def __init__(
        self,
        command: str,
        classification: Classification,
        tool_name: str | None = None,
    ) -> None:
        super().__init__(
            f"Command refused pending confirmation: this action cannot be undone. "
            f"Please confirm manually.\nCommand: {command}",
            tool_name=tool_name,
        )
        self.command = command
        self.classification = classification
