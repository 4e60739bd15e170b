"""Sharkbait - execution core for an LLM-driven coding agent.

Turns a model's streamed function-call output into validated tool
invocations and gates destructive shell commands behind a reversibility
classifier before they run.

Quick Start:
    >>> from sharkbait import StreamAccumulator, ToolRegistry
    >>> registry = ToolRegistry()
    >>> registry.list_names()
    ['run_command']
"""

__version__ = "0.1.0"

from sharkbait.ai import (
    ChatChunk,
    CommandClassifier,
    StreamAccumulator,
    ToolCall,
    ToolCallDelta,
    ToolError,
    ToolRegistry,
)
from sharkbait.config import SharkbaitConfig, load_config

__all__ = [
    "ChatChunk",
    "CommandClassifier",
    "SharkbaitConfig",
    "StreamAccumulator",
    "ToolCall",
    "ToolCallDelta",
    "ToolError",
    "ToolRegistry",
    "__version__",
    "load_config",
]
