"""Concrete tool implementations for Sharkbait.

This package contains the built-in tools that ``ToolRegistry`` registers at
construction time.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sharkbait.ai.tools.implementations.shell import (
    RunCommandInput,
    check_command,
    create_run_command,
    get_shell_config,
    reap_background_processes,
    run_command,
    set_shell_config,
)

if TYPE_CHECKING:
    from langchain_core.tools import BaseTool

    from sharkbait.config.models import ToolConfig

__all__ = [
    "RunCommandInput",
    "check_command",
    "create_run_command",
    "get_builtin_tools",
    "get_shell_config",
    "reap_background_processes",
    "run_command",
    "set_shell_config",
]


def get_builtin_tools(config: ToolConfig) -> list[BaseTool]:
    """Return the built-in tools enabled by ``config``.

    Tools are built fresh and bound to this config, so two registries never
    share settings.

    Args:
        config: Tool configuration

    Returns:
        Built-in tools not listed in ``config.disabled_tools``
    """
    builtins: list[BaseTool] = [create_run_command(config.shell)]
    return [t for t in builtins if t.name not in config.disabled_tools]
