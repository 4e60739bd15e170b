"""Configuration module for Sharkbait.

This module provides Pydantic models and utilities for managing Sharkbait configuration.
"""

from sharkbait.config.env import EnvSettings, load_env_settings
from sharkbait.config.loader import (
    deep_merge,
    find_project_config,
    user_config_path,
    load_config,
    load_env_config,
    load_yaml_config,
    merge_configs,
)
from sharkbait.config.models import (
    LoggingConfig,
    SharkbaitConfig,
    ShellToolConfig,
    ToolConfig,
)

__all__ = [
    "EnvSettings",
    "LoggingConfig",
    "SharkbaitConfig",
    "ShellToolConfig",
    "ToolConfig",
    "deep_merge",
    "find_project_config",
    "user_config_path",
    "load_config",
    "load_env_config",
    "load_env_settings",
    "load_yaml_config",
    "merge_configs",
]
