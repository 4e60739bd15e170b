"""Execution of finalized tool calls against a registry.

Bridges the stream accumulator and the registry for the orchestrator: each
call's arguments are decoded, the call is dispatched, and any ``ToolError`` is
captured on the result instead of aborting the remaining calls.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from langchain_core.messages import ToolMessage

from sharkbait.ai.tools.exceptions import ToolError
from sharkbait.ai.tools.parser import parse_arguments

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sharkbait.ai.streaming import ToolCall
    from sharkbait.ai.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

__all__ = ["ToolCallResult", "execute_tool_call", "execute_tool_calls"]


@dataclass
class ToolCallResult:
    """Outcome of one tool call.

    Exactly one of ``result`` and ``error`` is meaningful: ``error`` is set
    when the call failed.
    """

    call: ToolCall
    result: Any = None
    error: ToolError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def content(self) -> str:
        """Render the result (or error) as text for the model."""
        if self.error is not None:
            return f"Error ({self.error.code}): {self.error.message}"
        if isinstance(self.result, str):
            return self.result
        return json.dumps(self.result, default=str)

    def to_message(self) -> ToolMessage:
        """Build the LangChain ToolMessage answering this call."""
        return ToolMessage(
            content=self.content(),
            tool_call_id=self.call.id,
            name=self.call.name,
            status="success" if self.ok else "error",
        )


async def execute_tool_call(registry: ToolRegistry, call: ToolCall) -> ToolCallResult:
    """Parse and dispatch a single call, capturing ToolErrors."""
    try:
        arguments = parse_arguments(call)
        result = await registry.adispatch(call.name, arguments)
    except ToolError as e:
        logger.info(f"Tool call {call.id} ({call.name}) failed: {e.code}")
        return ToolCallResult(call=call, error=e)

    return ToolCallResult(call=call, result=result)


async def execute_tool_calls(
    registry: ToolRegistry,
    calls: Iterable[ToolCall] | None,
    parallel: bool = True,
) -> list[ToolCallResult]:
    """Execute finalized tool calls.

    Args:
        registry: Registry to dispatch against
        calls: Calls from the accumulator (None means the model made none)
        parallel: Run calls concurrently instead of one after another

    Returns:
        One result per call, ordered by call index regardless of which call
        finished first.
    """
    ordered = sorted(calls or [], key=lambda c: c.index)
    if not ordered:
        return []

    if parallel:
        return list(
            await asyncio.gather(*(execute_tool_call(registry, c) for c in ordered))
        )

    results: list[ToolCallResult] = []
    for call in ordered:
        results.append(await execute_tool_call(registry, call))
    return results
