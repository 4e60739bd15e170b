"""Pytest configuration and shared fixtures for Sharkbait tests."""

import pytest

from sharkbait.ai.tools.implementations.shell import set_shell_config
from sharkbait.config.models import ShellToolConfig


@pytest.fixture(autouse=True)
def reset_shell_config():
    """Restore default run_command settings around every test."""
    set_shell_config(ShellToolConfig())
    yield
    set_shell_config(ShellToolConfig())


@pytest.fixture
def isolated_env(monkeypatch, tmp_path):
    """Run in an empty directory with no SHARKBAIT_* variables set.

    Returns:
        The temporary working directory.
    """
    for var in (
        "SHARKBAIT_LOG_LEVEL",
        "SHARKBAIT_SHELL_TIMEOUT",
        "SHARKBAIT_SHELL_WORKING_DIRECTORY",
        "SHARKBAIT_DISABLED_TOOLS",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
