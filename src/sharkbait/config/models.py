"""Pydantic configuration models for Sharkbait.

This module provides strongly-typed configuration models using Pydantic v2,
ensuring validation, type safety, and ease of use across the application.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ShellToolConfig(BaseModel):
    """Configuration for the run_command tool.

    Controls the interpreter, default timeout, working directory and whether
    background processes may be started.

    Example:
        >>> config = ShellToolConfig(timeout=60, working_directory="/tmp")
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
    )

    timeout: float = Field(
        default=30.0,
        gt=0,
        le=600,
        description="Default timeout for shell commands in seconds (max 10 minutes)",
    )
    working_directory: str | None = Field(
        default=None,
        description="Default working directory for commands (None = current directory)",
    )
    shell: str = Field(
        default="/bin/bash",
        description="Interpreter invoked as `<shell> -c <command>`",
    )
    allow_background: bool = Field(
        default=True,
        description="Allow commands to be started in the background",
    )

    @field_validator("shell")
    @classmethod
    def validate_shell(cls, v: str) -> str:
        """Validate shell is a non-empty path."""
        if not v or not v.strip():
            raise ValueError("shell cannot be empty")
        return v


class ToolConfig(BaseModel):
    """Configuration for the tool calling system.

    Example:
        >>> config = ToolConfig(
        ...     disabled_tools=["run_command"],
        ...     shell=ShellToolConfig(timeout=10),
        ... )
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
    )

    disabled_tools: list[str] = Field(
        default_factory=list,
        description="Built-in tools that are not registered at startup",
    )
    shell: ShellToolConfig = Field(
        default_factory=ShellToolConfig,
        description="run_command tool-specific configuration",
    )


class LoggingConfig(BaseModel):
    """Configuration for diagnostic logging."""

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Minimum level for the sharkbait logger",
    )
    file: Path | None = Field(
        default=None,
        description="Optional log file (appended to)",
    )
    rich: bool = Field(
        default=True,
        description="Render console logs with rich",
    )
    redact: bool = Field(
        default=True,
        description="Redact API keys, tokens and passwords from log messages",
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: object) -> object:
        """Accept lowercase level names."""
        if isinstance(v, str):
            return v.upper()
        return v


class SharkbaitConfig(BaseModel):
    """Root configuration for Sharkbait.

    Example:
        >>> config = SharkbaitConfig()
        >>> config.tools.shell.timeout
        30.0
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
    )

    tools: ToolConfig = Field(default_factory=ToolConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
