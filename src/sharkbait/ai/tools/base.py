"""Base classes and utilities for tool calling system.

Provides core data structures, enums, and utility functions used across
the tool calling implementation.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from langchain_core.tools import BaseTool


class Reversibility(str, Enum):
    """How hard an action is to undo.

    Attributes:
        EASY: Trivially undoable (mkdir, git checkout)
        EFFORT: Undoable with deliberate extra work (git push, npm publish)
        IRREVERSIBLE: Cannot be undone by any standard means (rm -rf, mkfs)
    """

    EASY = "easy"
    EFFORT = "effort"
    IRREVERSIBLE = "irreversible"

    def __str__(self) -> str:
        """Return string representation of reversibility tier."""
        return self.value


@dataclass
class ToolMetadata:
    """Metadata for a registered tool.

    Attributes:
        name: Tool name (used for lookups and binding to models)
        description: Human-readable description of what the tool does
        tool: The LangChain BaseTool instance that handles calls
        schema: JSON schema for tool arguments (derived from the tool's args_schema)
        tags: Optional tags for categorization (e.g., ["shell", "builtin"])
    """

    name: str
    description: str
    tool: BaseTool
    schema: dict[str, Any]
    tags: list[str] | None = None

    def __post_init__(self) -> None:
        """Validate metadata after initialization."""
        if not self.name or not self.name.strip():
            raise ValueError("Tool name cannot be empty")

    def to_definition(self) -> dict[str, Any]:
        """Return the model-facing ``{name, description, parameters}`` definition."""
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.schema,
        }


def get_tool_schema(tool: BaseTool) -> dict[str, Any]:
    """Extract JSON schema from LangChain tool.

    Args:
        tool: LangChain BaseTool instance

    Returns:
        JSON schema dictionary for tool arguments

    Example:
        >>> from langchain_core.tools import tool
        >>> @tool
        ... def my_tool(x: int, y: str) -> str:
        ...     '''Example tool'''
        ...     return f"{y}: {x}"
        >>> schema = get_tool_schema(my_tool)
        >>> assert "properties" in schema
    """
    args_schema = getattr(tool, "args_schema", None)
    if args_schema is not None:
        if isinstance(args_schema, dict):
            return args_schema
        schema: dict[str, Any] = args_schema.model_json_schema()
        return schema

    if hasattr(tool, "get_input_schema"):
        schema = tool.get_input_schema().model_json_schema()
        return schema

    return {"type": "object", "properties": {}}
