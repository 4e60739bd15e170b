"""Tool calling system for Sharkbait.

This module provides the tool registry, the shell command tool and its
safety classifier, and helpers for executing tool calls reassembled from a
model stream.

Architecture:
- Explicit registry instances: no global tool state
- Uniform errors: every failure crossing the registry is a ToolError
- Policy as data: command safety rules are ordered, auditable tables

Example:
    >>> from sharkbait.ai.streaming import StreamAccumulator
    >>> from sharkbait.ai.tools import ToolRegistry, execute_tool_calls
    >>>
    >>> registry = ToolRegistry()
    >>> accumulator = StreamAccumulator()
    >>> # ... ingest chunks until result.is_complete ...
    >>> results = await execute_tool_calls(registry, result.tool_calls)
"""

from sharkbait.ai.tools.base import Reversibility, ToolMetadata
from sharkbait.ai.tools.exceptions import (
    BlockedCommandError,
    DuplicateToolError,
    IrreversibleActionError,
    ToolError,
    ToolExecutionError,
    ToolNotFoundError,
    ToolTimeoutError,
    ToolValidationError,
)
from sharkbait.ai.tools.executor import (
    ToolCallResult,
    execute_tool_call,
    execute_tool_calls,
)
from sharkbait.ai.tools.implementations import run_command
from sharkbait.ai.tools.parser import ParsedToolCall, parse_arguments, parse_tool_calls
from sharkbait.ai.tools.permissions.classifier import Classification, CommandClassifier
from sharkbait.ai.tools.registry import ToolRegistry

__all__ = [
    "BlockedCommandError",
    "Classification",
    "CommandClassifier",
    "DuplicateToolError",
    "IrreversibleActionError",
    "ParsedToolCall",
    "Reversibility",
    "ToolCallResult",
    "ToolError",
    "ToolExecutionError",
    "ToolMetadata",
    "ToolNotFoundError",
    "ToolRegistry",
    "ToolTimeoutError",
    "ToolValidationError",
    "execute_tool_call",
    "execute_tool_calls",
    "parse_arguments",
    "parse_tool_calls",
    "run_command",
]
