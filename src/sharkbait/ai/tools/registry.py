"""Tool registry for managing LangChain tools.

Provides centralized registration, lookup and dispatch of tools, normalizing
every handler failure into the ``ToolError`` family so the orchestrator only
ever deals with one error shape.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from langchain_core.utils.function_calling import convert_to_openai_tool
from pydantic import ValidationError

from sharkbait.ai.tools.base import ToolMetadata, get_tool_schema
from sharkbait.ai.tools.exceptions import (
    DuplicateToolError,
    ToolError,
    ToolExecutionError,
    ToolNotFoundError,
    ToolValidationError,
)
from sharkbait.ai.tools.implementations import get_builtin_tools
from sharkbait.config.models import ToolConfig
from sharkbait.utils.security import sanitize_for_logging

if TYPE_CHECKING:
    from collections.abc import Iterable

    from langchain_core.language_models import BaseChatModel
    from langchain_core.runnables import Runnable
    from langchain_core.tools import BaseTool

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Central registry for managing LangChain tools.

    The registry is an explicit instance owned by whoever sets up the agent;
    there is no module-level registry. Tools are registered during setup and
    the mapping is only read afterwards, so concurrent dispatches need no
    locking.

    Example:
        >>> from langchain_core.tools import tool
        >>>
        >>> @tool
        ... def double(x: int) -> int:
        ...     '''Double a number'''
        ...     return x * 2
        >>>
        >>> registry = ToolRegistry()
        >>> registry.register(double)
        >>> registry.dispatch("double", {"x": 21})
        42
        >>> registry.has("run_command")
        True
    """

    def __init__(
        self,
        config: ToolConfig | None = None,
        tools: Iterable[BaseTool] | None = None,
    ) -> None:
        """Initialize tool registry and register the initial tool set.

        Args:
            config: ToolConfig controlling built-in tools (defaults if None)
            tools: Initial tools. None registers the built-ins from config.
                Duplicates are skipped with a warning, first one wins.
        """
        self.config = config or ToolConfig()
        self._tools: dict[str, ToolMetadata] = {}

        if tools is None:
            tools = get_builtin_tools(self.config)
        self._register_all(tools)

    def _register_all(self, tools: Iterable[BaseTool]) -> None:
        for tool in tools:
            if tool.name in self._tools:
                logger.warning(
                    f"Tool {tool.name} already registered, skipping duplicate"
                )
                continue
            self._add(tool, tags=None)

    def _add(self, tool: BaseTool, tags: list[str] | None) -> None:
        self._tools[tool.name] = ToolMetadata(
            name=tool.name,
            description=tool.description or "",
            tool=tool,
            schema=get_tool_schema(tool),
            tags=tags,
        )
        logger.debug(f"Registered tool: {tool.name}")

    def register(self, tool: BaseTool, tags: list[str] | None = None) -> None:
        """Register a custom tool.

        Args:
            tool: LangChain BaseTool instance (decorated with @tool)
            tags: Optional tags for categorization

        Raises:
            ToolValidationError: If the tool has no name
            DuplicateToolError: If a tool with the same name is registered
        """
        tool_name = tool.name

        if not tool_name or not tool_name.strip():
            raise ToolValidationError("Tool must have a non-empty name")

        if tool_name in self._tools:
            raise DuplicateToolError(
                f"Tool '{tool_name}' is already registered", tool_name=tool_name
            )

        self._add(tool, tags=tags)

    def get_tool(self, tool_name: str) -> ToolMetadata:
        """Retrieve tool metadata by name.

        Raises:
            ToolNotFoundError: If tool is not registered
        """
        if tool_name not in self._tools:
            available = ", ".join(self._tools) if self._tools else "none"
            raise ToolNotFoundError(
                f"Unknown tool: {tool_name}. Available tools: {available}",
                tool_name=tool_name,
            )

        return self._tools[tool_name]

    def list_tools(self, tags: list[str] | None = None) -> list[ToolMetadata]:
        """List registered tools, optionally filtered by tags.

        Args:
            tags: Filter by tags (tool must have ALL specified tags)
        """
        tools = list(self._tools.values())

        if tags:
            tools = [t for t in tools if t.tags and all(tag in t.tags for tag in tags)]

        return tools

    def has(self, tool_name: str) -> bool:
        """Check if a tool is registered."""
        return tool_name in self._tools

    @property
    def size(self) -> int:
        """Number of registered tools."""
        return len(self._tools)

    def list_names(self) -> list[str]:
        """Return registered tool names in registration order."""
        return list(self._tools)

    def get_definitions(self) -> list[dict[str, Any]]:
        """Return ``{name, description, parameters}`` for every tool."""
        return [metadata.to_definition() for metadata in self._tools.values()]

    def to_openai_tools(self) -> list[dict[str, Any]]:
        """Return tool definitions in OpenAI ``{"type": "function", ...}`` form."""
        return [
            convert_to_openai_tool(metadata.tool) for metadata in self._tools.values()
        ]

    def bind_to_model(
        self,
        model: BaseChatModel,
        tool_names: list[str] | None = None,
    ) -> Runnable[Any, Any]:
        """Bind registered tools to a LangChain chat model.

        Args:
            model: LangChain BaseChatModel instance
            tool_names: Optional list of specific tools to bind (default: all)

        Returns:
            Model with tools bound (via bind_tools()), or the model unchanged
            when there is nothing to bind.

        Raises:
            ToolNotFoundError: If a requested tool is not registered
        """
        names = self.list_names() if tool_names is None else tool_names
        tools_to_bind = [self.get_tool(name).tool for name in names]

        if tools_to_bind:
            return model.bind_tools(tools_to_bind)

        return model

    def _prepare(self, tool_name: str, arguments: Any) -> ToolMetadata:
        metadata = self.get_tool(tool_name)

        if not isinstance(arguments, dict):
            raise ToolValidationError(
                f"Arguments must be a JSON object, got {type(arguments).__name__}",
                tool_name=tool_name,
            )

        logger.debug(
            f"Executing tool {tool_name} with args: "
            f"{sanitize_for_logging(json.dumps(arguments, default=str))}"
        )
        return metadata

    @contextmanager
    def _normalize_errors(self, tool_name: str) -> Iterator[None]:
        """Convert any failure inside the block into a ToolError."""
        started = time.perf_counter()
        try:
            yield
        except ToolError as e:
            if e.tool_name is None:
                e.tool_name = tool_name
            logger.error(f"Tool {tool_name} failed ({e.code}): {e.message}")
            raise
        except ValidationError as e:
            logger.error(f"Tool {tool_name} rejected its arguments: {e}")
            raise ToolValidationError(
                f"Invalid arguments: {e}", tool_name=tool_name
            ) from e
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.error(f"Tool {tool_name} failed: {message}")
            raise ToolExecutionError(message, tool_name=tool_name) from e
        else:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.debug(
                f"Tool {tool_name} completed successfully in {elapsed_ms:.0f}ms"
            )

    def dispatch(self, tool_name: str, arguments: dict[str, Any]) -> Any:
        """Execute a tool by name.

        Arguments are validated against the tool's input schema before the
        handler runs. The handler's result is returned unmodified.

        Args:
            tool_name: Name of the tool to run
            arguments: Parsed argument object

        Returns:
            Whatever the tool returned

        Raises:
            ToolNotFoundError: If tool is not registered
            ToolValidationError: If arguments are not an object or fail the schema
            ToolError: Any other failure, tagged with ``tool_name``
        """
        metadata = self._prepare(tool_name, arguments)
        with self._normalize_errors(tool_name):
            return metadata.tool.invoke(arguments)

    async def adispatch(self, tool_name: str, arguments: dict[str, Any]) -> Any:
        """Async version of :meth:`dispatch`.

        Synchronous tools run in the default executor, so several calls can
        be awaited concurrently.
        """
        metadata = self._prepare(tool_name, arguments)
        with self._normalize_errors(tool_name):
            return await metadata.tool.ainvoke(arguments)

    def __len__(self) -> int:
        """Return number of registered tools."""
        return len(self._tools)

    def __contains__(self, tool_name: str) -> bool:
        """Check if a tool is registered."""
        return tool_name in self._tools

    def __repr__(self) -> str:
        """Return string representation of registry."""
        return f"ToolRegistry(tools={self.list_names()})"
