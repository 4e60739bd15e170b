"""Model-facing execution core.

Reassembles streamed function calls from chat models and executes them
through the tool registry, with shell commands gated by the command safety
classifier.
"""

from sharkbait.ai.exceptions import SharkbaitAIError, StreamingError
from sharkbait.ai.streaming import (
    ChatChunk,
    ChunkResult,
    StreamAccumulator,
    StreamedResponse,
    ToolCall,
    ToolCallDelta,
    chunk_from_message,
    stream_response,
)
from sharkbait.ai.tools import (
    BlockedCommandError,
    CommandClassifier,
    IrreversibleActionError,
    Reversibility,
    ToolError,
    ToolRegistry,
    execute_tool_calls,
)

__all__ = [
    "BlockedCommandError",
    "ChatChunk",
    "ChunkResult",
    "CommandClassifier",
    "IrreversibleActionError",
    "Reversibility",
    "SharkbaitAIError",
    "StreamAccumulator",
    "StreamedResponse",
    "StreamingError",
    "ToolCall",
    "ToolCallDelta",
    "ToolError",
    "ToolRegistry",
    "chunk_from_message",
    "execute_tool_calls",
    "stream_response",
]
