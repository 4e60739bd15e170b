"""Streaming response handling for AI chat models.

Models stream function calls as fragments: the first fragment for a call
usually carries its id and name, and later fragments carry slices of the JSON
argument text. Fragments for several calls may interleave, distinguished only
by their call index. ``StreamAccumulator`` reassembles these fragments into
complete ``ToolCall`` records while collecting the plain text of the response.

Example:
    >>> accumulator = StreamAccumulator()
    >>> accumulator.ingest(ChatChunk(tool_calls=[
    ...     ToolCallDelta(index=0, id="call_1", name="run_command", arguments='{"comm'),
    ... ]))
    ChunkResult(text='', tool_calls=None, is_complete=False)
    >>> result = accumulator.ingest(ChatChunk(
    ...     tool_calls=[ToolCallDelta(index=0, arguments='and": "ls"}')],
    ...     finish_reason="tool_calls",
    ... ))
    >>> result.tool_calls[0].arguments
    '{"command": "ls"}'
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from rich.console import Console

from sharkbait.ai.exceptions import StreamingError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from langchain_core.language_models import BaseChatModel
    from langchain_core.messages import AIMessageChunk, BaseMessage

logger = logging.getLogger(__name__)

__all__ = [
    "ChatChunk",
    "ChunkResult",
    "StreamAccumulator",
    "StreamedResponse",
    "ToolCall",
    "ToolCallDelta",
    "chunk_from_message",
    "stream_response",
]

# response_metadata keys that carry the terminal marker, by provider
_FINISH_REASON_KEYS = ("finish_reason", "stop_reason", "done_reason")


@dataclass(frozen=True)
class ToolCallDelta:
    """One fragment of a streamed function call.

    Attributes:
        index: Which call in the response this fragment belongs to
        id: Call identifier, sent once per index
        name: Function name, sent once per index
        arguments: Slice of the JSON-encoded argument object
    """

    index: int
    id: str | None = None
    name: str | None = None
    arguments: str | None = None


@dataclass(frozen=True)
class ChatChunk:
    """One chunk of a streamed chat response.

    Attributes:
        content: Plain text in this chunk (may be empty)
        tool_calls: Function-call fragments carried by this chunk
        finish_reason: Terminal marker; anything but None ends the stream
    """

    content: str = ""
    tool_calls: list[ToolCallDelta] | None = None
    finish_reason: str | None = None

    @classmethod
    def from_openai(cls, payload: dict[str, Any]) -> ChatChunk:
        """Build a chunk from an OpenAI-format streaming payload.

        Example:
            >>> ChatChunk.from_openai({
            ...     "choices": [{
            ...         "delta": {"tool_calls": [{
            ...             "index": 0, "id": "call_1",
            ...             "function": {"name": "run_command", "arguments": ""},
            ...         }]},
            ...         "finish_reason": None,
            ...     }]
            ... }).tool_calls[0].name
            'run_command'
        """
        choices = payload.get("choices") or [{}]
        choice = choices[0]
        delta = choice.get("delta") or {}

        deltas: list[ToolCallDelta] | None = None
        raw_calls = delta.get("tool_calls")
        if raw_calls:
            deltas = []
            for raw in raw_calls:
                function = raw.get("function") or {}
                deltas.append(
                    ToolCallDelta(
                        index=raw.get("index") or 0,
                        id=raw.get("id"),
                        name=function.get("name"),
                        arguments=function.get("arguments"),
                    )
                )

        return cls(
            content=delta.get("content") or "",
            tool_calls=deltas,
            finish_reason=choice.get("finish_reason"),
        )


@dataclass(frozen=True)
class ToolCall:
    """A complete tool call reassembled from a stream.

    Attributes:
        id: Call identifier (non-empty)
        name: Tool name (non-empty)
        arguments: JSON text of the argument object
        index: Position of the call within the response
    """

    id: str
    name: str
    arguments: str
    index: int

    def to_dict(self) -> dict[str, Any]:
        """Render the call in OpenAI assistant-message form."""
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments},
        }


@dataclass(frozen=True)
class ChunkResult:
    """Outcome of ingesting one chunk.

    ``tool_calls`` is only meaningful when ``is_complete`` is True; it is None
    both while the stream is still running and when a finished stream held no
    tool calls.
    """

    text: str
    tool_calls: list[ToolCall] | None
    is_complete: bool


@dataclass
class _PendingToolCall:
    index: int
    id: str = ""
    name: str = ""
    arguments: list[str] = field(default_factory=list)


class StreamAccumulator:
    """Reassembles streamed function-call fragments into complete tool calls.

    One instance handles one stream at a time and is not thread-safe. Call
    :meth:`reset` (or use a fresh instance) before reusing it for another
    response so nothing from the previous stream leaks into the next.
    """

    def __init__(self) -> None:
        self._records: dict[int, _PendingToolCall] = {}
        self._text: list[str] = []

    def ingest(self, chunk: ChatChunk) -> ChunkResult:
        """Consume one chunk.

        Args:
            chunk: Next chunk in arrival order

        Returns:
            The chunk's text, plus the finalized tool calls if this chunk
            carries a terminal marker.
        """
        self._text.append(chunk.content)

        for delta in chunk.tool_calls or ():
            record = self._records.get(delta.index)
            if record is None:
                record = _PendingToolCall(
                    index=delta.index,
                    id=delta.id or "",
                    name=delta.name or "",
                )
                self._records[delta.index] = record
            else:
                # id and name are set once; later values never overwrite them
                if not record.id and delta.id:
                    record.id = delta.id
                if not record.name and delta.name:
                    record.name = delta.name
            if delta.arguments:
                record.arguments.append(delta.arguments)

        is_complete = chunk.finish_reason is not None
        return ChunkResult(
            text=chunk.content,
            tool_calls=self.finalize() if is_complete else None,
            is_complete=is_complete,
        )

    def finalize(self) -> list[ToolCall] | None:
        """Return the complete tool calls ordered by index.

        Records missing an id or a name are dropped.

        Returns:
            The calls, or None when there is nothing actionable.
        """
        calls: list[ToolCall] = []
        for index in sorted(self._records):
            record = self._records[index]
            if not record.id or not record.name:
                logger.debug(
                    f"Dropping incomplete tool call at index {index} "
                    f"(id={record.id!r}, name={record.name!r})"
                )
                continue
            calls.append(
                ToolCall(
                    id=record.id,
                    name=record.name,
                    arguments="".join(record.arguments),
                    index=index,
                )
            )

        return calls or None

    get_accumulated_tool_calls = finalize

    def get_full_text(self) -> str:
        """Return all plain text ingested so far."""
        return "".join(self._text)

    @property
    def has_pending_calls(self) -> bool:
        return bool(self._records)

    def reset(self) -> None:
        """Clear all state so the instance can accept a new stream."""
        self._records.clear()
        self._text.clear()


def chunk_from_message(message: AIMessageChunk) -> ChatChunk:
    """Convert a LangChain ``AIMessageChunk`` into a ``ChatChunk``.

    Args:
        message: Chunk yielded by ``BaseChatModel.stream``

    Returns:
        Equivalent ChatChunk
    """
    content = message.content
    if not isinstance(content, str):
        # Content blocks (Anthropic): keep only the text parts
        content = "".join(
            block.get("text", "") if isinstance(block, dict) else str(block)
            for block in content
        )

    deltas = [
        ToolCallDelta(
            index=tc.get("index") or 0,
            id=tc.get("id"),
            name=tc.get("name"),
            arguments=tc.get("args"),
        )
        for tc in getattr(message, "tool_call_chunks", None) or []
    ]

    metadata = getattr(message, "response_metadata", None) or {}
    finish_reason = next(
        (metadata[key] for key in _FINISH_REASON_KEYS if metadata.get(key)), None
    )

    return ChatChunk(
        content=content,
        tool_calls=deltas or None,
        finish_reason=finish_reason,
    )


@dataclass(frozen=True)
class StreamedResponse:
    """Result of :func:`stream_response`.

    Attributes:
        text: Full plain-text response
        tool_calls: Finalized tool calls, None if the model made none
        complete: Whether a terminal marker was received
    """

    text: str
    tool_calls: list[ToolCall] | None
    complete: bool


def stream_response(
    model: BaseChatModel,
    messages: Iterable[BaseMessage],
    console: Console | None = None,
    show_prefix: bool = True,
    accumulator: StreamAccumulator | None = None,
) -> StreamedResponse:
    """Stream a model response, echoing text and collecting tool calls.

    Args:
        model: LangChain chat model with .stream() support.
        messages: Conversation messages as LangChain BaseMessage objects.
        console: Rich console for output. Creates default if None.
        show_prefix: Whether to print "Assistant: " before the first token.
        accumulator: Accumulator to use; it is reset before streaming.

    Returns:
        StreamedResponse with the text and any finalized tool calls.

    Raises:
        StreamingError: If streaming fails or is interrupted, includes partial response.
            - Message "Streaming interrupted by user" indicates KeyboardInterrupt (Ctrl+C)
            - Other messages indicate actual errors during streaming
    """
    if console is None:
        console = Console()
    if accumulator is None:
        accumulator = StreamAccumulator()
    accumulator.reset()

    first_token = True
    final: ChunkResult | None = None

    try:
        for message in model.stream(list(messages)):
            result = accumulator.ingest(chunk_from_message(message))

            if result.text:
                if first_token and show_prefix:
                    console.print("[bold cyan]Assistant:[/bold cyan] ", end="")
                first_token = False
                console.print(result.text, end="", markup=False, highlight=False)

            if result.is_complete:
                final = result

        if not first_token:
            console.print()

    except KeyboardInterrupt:
        partial_response = accumulator.get_full_text()
        console.print("\n[yellow]⚠ Interrupted[/yellow]")
        raise StreamingError(
            "Streaming interrupted by user", partial_response=partial_response
        ) from KeyboardInterrupt()

    except Exception as e:
        partial_response = accumulator.get_full_text()
        console.print(f"\n[red]❌ Streaming error: {e}[/red]")
        raise StreamingError(
            f"Streaming failed: {e}", partial_response=partial_response
        ) from e

    if final is None:
        logger.warning("Stream ended without a finish reason; tool calls discarded")

    return StreamedResponse(
        text=accumulator.get_full_text(),
        tool_calls=final.tool_calls if final is not None else None,
        complete=final is not None,
    )
