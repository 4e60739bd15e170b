"""Configuration loading for Sharkbait.

Sources are merged from lowest to highest precedence:

1. Model defaults
2. ``~/.sharkbait/config.yaml``
3. The nearest ``.sharkbait/config.yaml`` above the working directory
4. ``SHARKBAIT_*`` environment variables (and ``.env``)
5. Explicit overrides from the caller
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from sharkbait.config.env import EnvSettings, load_env_settings
from sharkbait.config.models import SharkbaitConfig
from sharkbait.utils.security import warn_if_env_not_ignored

CONFIG_DIR_NAME = ".sharkbait"
CONFIG_FILE_NAME = "config.yaml"


def user_config_path() -> Path:
    """Location of the per-user config file (it may not exist)."""
    return Path.home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def find_project_config(start: Path | None = None) -> Path | None:
    """Return the closest ``.sharkbait/config.yaml`` at or above ``start``.

    The search never leaves the enclosing git repository.
    """
    start = start or Path.cwd()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_DIR_NAME / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
        if (directory / ".git").exists():
            return None
    return None


def load_yaml_config(path: Path | None) -> dict[str, Any]:
    """Read a YAML mapping; a missing or empty file yields ``{}``.

    Raises:
        yaml.YAMLError: If the file is not valid YAML.
        ValueError: If the document is not a mapping.
    """
    if path is None or not path.exists():
        return {}

    text = path.read_text(encoding="utf-8")
    try:
        content = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Invalid YAML in {path}: {e}") from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ValueError(
            f"Config file must contain a YAML mapping, got {type(content).__name__}"
        )
    return content


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return ``base`` updated with ``override``, recursing into nested dicts.

    Lists and scalars from ``override`` replace those in ``base``. Neither
    input is modified.
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = deep_merge(current, value)
        merged[key] = value
    return merged


def merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
    """Fold ``configs`` left to right with :func:`deep_merge`."""
    merged: dict[str, Any] = {}
    for config in configs:
        merged = deep_merge(merged, config)
    return merged


def load_env_config(env_settings: EnvSettings | None = None) -> dict[str, Any]:
    """Translate ``SHARKBAIT_*`` settings into a partial config dict."""
    settings = env_settings if env_settings is not None else load_env_settings()

    shell: dict[str, Any] = {}
    if settings.shell_timeout is not None:
        shell["timeout"] = settings.shell_timeout
    if settings.shell_working_directory:
        shell["working_directory"] = settings.shell_working_directory

    tools: dict[str, Any] = {}
    if shell:
        tools["shell"] = shell
    if settings.disabled_tools:
        tools["disabled_tools"] = [
            name.strip() for name in settings.disabled_tools.split(",") if name.strip()
        ]

    config: dict[str, Any] = {}
    if settings.log_level:
        config["logging"] = {"level": settings.log_level}
    if tools:
        config["tools"] = tools
    return config


def load_config(
    global_config_path: Path | None = None,
    project_config_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
    env_settings: EnvSettings | None = None,
) -> SharkbaitConfig:
    """Load and validate the merged configuration.

    Args:
        global_config_path: User config file (default ``~/.sharkbait/config.yaml``).
        project_config_path: Project config file (default: searched upward).
        cli_overrides: Highest-precedence values from the caller.
        env_settings: Pre-loaded environment settings.

    Raises:
        yaml.YAMLError: If a config file has invalid YAML syntax.
        ValueError: If a config file is not a mapping.
        pydantic.ValidationError: If the merged config fails validation.
    """
    global_path = global_config_path or user_config_path()
    project_path = project_config_path or find_project_config()

    warn_if_env_not_ignored()

    merged = merge_configs(
        SharkbaitConfig().model_dump(mode="json"),
        load_yaml_config(global_path),
        load_yaml_config(project_path),
        load_env_config(env_settings),
        cli_overrides or {},
    )
    return SharkbaitConfig.model_validate(merged)

