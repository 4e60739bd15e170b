"""Environment variable settings for Sharkbait.

All settings are read from ``SHARKBAIT_*`` environment variables and an
optional ``.env`` file in the working directory.
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvSettings(BaseSettings):
    """Settings sourced from the environment.

    Environment Variables:
        SHARKBAIT_LOG_LEVEL: Logging level (e.g. DEBUG)
        SHARKBAIT_SHELL_TIMEOUT: Default run_command timeout in seconds
        SHARKBAIT_SHELL_WORKING_DIRECTORY: Default run_command working directory
        SHARKBAIT_DISABLED_TOOLS: Comma-separated built-in tools to skip

    Example:
        >>> settings = EnvSettings(shell_timeout=5)
        >>> settings.shell_timeout
        5.0
    """

    model_config = SettingsConfigDict(
        env_prefix="SHARKBAIT_",
        env_file=".env",
        extra="ignore",
    )

    log_level: str | None = Field(default=None)
    shell_timeout: float | None = Field(default=None)
    shell_working_directory: str | None = Field(default=None)
    disabled_tools: str | None = Field(
        default=None,
        description="Comma-separated list of tool names",
    )

    @field_validator("disabled_tools")
    @classmethod
    def strip_disabled_tools(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v


def load_env_settings() -> EnvSettings:
    """Load settings from environment variables and .env file."""
    return EnvSettings()
