"""Tool call argument parsing.

Finalized stream calls carry their arguments as JSON text. This module turns
them into argument objects ready for dispatch and reports malformed model
output as ``ToolValidationError`` at a single boundary.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sharkbait.ai.tools.exceptions import ToolValidationError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sharkbait.ai.streaming import ToolCall

__all__ = ["ParsedToolCall", "parse_arguments", "parse_tool_calls"]


@dataclass
class ParsedToolCall:
    """A tool call whose arguments have been decoded.

    Attributes:
        id: Call identifier from the model
        name: Tool name
        arguments: Decoded argument object
        index: Position of the call within the response
    """

    id: str
    name: str
    arguments: dict[str, Any]
    index: int = 0

    def __repr__(self) -> str:
        args = repr(self.arguments)
        if len(args) > 80:
            args = args[:77] + "..."
        return f"ParsedToolCall(id={self.id!r}, name={self.name!r}, arguments={args})"


def parse_arguments(call: ToolCall) -> dict[str, Any]:
    """Decode a call's JSON argument text.

    An empty string is treated as an empty object, since some providers
    omit arguments for parameterless tools.

    Raises:
        ToolValidationError: If the text is not valid JSON or not an object
    """
    text = call.arguments.strip()
    if not text:
        return {}

    try:
        arguments = json.loads(text)
    except json.JSONDecodeError as e:
        raise ToolValidationError(
            f"Malformed arguments JSON for call {call.id}: {e}", tool_name=call.name
        ) from e

    if not isinstance(arguments, dict):
        raise ToolValidationError(
            f"Arguments for call {call.id} must be a JSON object, "
            f"got {type(arguments).__name__}",
            tool_name=call.name,
        )

    return arguments


def parse_tool_calls(calls: Iterable[ToolCall] | None) -> list[ParsedToolCall]:
    """Decode a list of finalized calls.

    Args:
        calls: Calls from ``StreamAccumulator.finalize`` (None means no calls)

    Returns:
        Parsed calls in the same order

    Raises:
        ToolValidationError: On the first call with malformed arguments
    """
    if not calls:
        return []

    return [
        ParsedToolCall(
            id=call.id,
            name=call.name,
            arguments=parse_arguments(call),
            index=call.index,
        )
        for call in calls
    ]
