"""Shell command execution tool with reversibility classification.

Provides shell command execution with:
- Hard blocking of catastrophic commands
- Refusal of irreversible commands pending human confirmation
- Warnings and undo hints for commands that need care
- Timeout enforcement that kills the whole process group
- Working directory control and optional background execution
"""

from __future__ import annotations

import contextlib
import logging
import os
import signal
import subprocess
from pathlib import Path
from typing import Any

from langchain_core.tools import BaseTool, tool
from pydantic import BaseModel, Field

from sharkbait.ai.tools.base import Reversibility
from sharkbait.ai.tools.exceptions import (
    BlockedCommandError,
    IrreversibleActionError,
    ToolExecutionError,
    ToolTimeoutError,
)
from sharkbait.ai.tools.permissions.classifier import Classification, CommandClassifier
from sharkbait.config.models import ShellToolConfig

logger = logging.getLogger(__name__)

TOOL_NAME = "run_command"

# Default for tools built without an explicit config
_TOOL_CONFIG: ShellToolConfig | None = None

_CLASSIFIER = CommandClassifier()

# Handles of background commands, kept until they exit and are reaped
_BACKGROUND_PROCESSES: set[subprocess.Popen[bytes]] = set()


def set_shell_config(config: ShellToolConfig) -> None:
    """Set the default config for run_command tools built without one.

    Args:
        config: ShellToolConfig from ToolConfig.shell
    """
    global _TOOL_CONFIG
    _TOOL_CONFIG = config


def get_shell_config() -> ShellToolConfig:
    """Get the current shell tool config.

    Returns:
        The configured ShellToolConfig, or a new default instance if not set.
    """
    return _TOOL_CONFIG if _TOOL_CONFIG is not None else ShellToolConfig()


def check_command(
    command: str, classifier: CommandClassifier | None = None
) -> Classification:
    """Apply execution policy to a command before it runs.

    Args:
        command: The command string to check
        classifier: Classifier to use (module default if None)

    Returns:
        The command's classification when execution may proceed.

    Raises:
        BlockedCommandError: If a hard-blocking rule matches
        IrreversibleActionError: If the command is irreversible but not blocked

    Example:
        >>> check_command("mkdir build").reversibility
        <Reversibility.EASY: 'easy'>
        >>> check_command("rm -rf /")  # Raises BlockedCommandError
    """
    classifier = classifier or _CLASSIFIER

    rule = classifier.match_blocking_rule(command)
    if rule is not None:
        raise BlockedCommandError(command, rule=rule, tool_name=TOOL_NAME)

    classification = classifier.classify(command)
    if classification.reversibility is Reversibility.IRREVERSIBLE:
        raise IrreversibleActionError(
            command, classification=classification, tool_name=TOOL_NAME
        )

    return classification


def _resolve_cwd(working_directory: str | None) -> str | None:
    if not working_directory:
        return None

    cwd_path = Path(working_directory)
    if not cwd_path.exists():
        raise ToolExecutionError(
            f"Working directory does not exist: {working_directory}",
            tool_name=TOOL_NAME,
        )
    if not cwd_path.is_dir():
        raise ToolExecutionError(
            f"Working directory is not a directory: {working_directory}",
            tool_name=TOOL_NAME,
        )
    return str(cwd_path)


def _kill_process_group(process: subprocess.Popen[str]) -> None:
    """Kill a process started with ``start_new_session`` and its children."""
    with contextlib.suppress(ProcessLookupError, PermissionError):
        if hasattr(os, "killpg"):
            os.killpg(process.pid, signal.SIGKILL)
        else:
            process.kill()


def _run_command(
    command: str,
    timeout: float,
    working_directory: str | None = None,
    shell: str = "/bin/bash",
) -> tuple[str, str, int]:
    """Run a command with timeout and capture output.

    The command runs in its own session. On timeout the entire process group
    is killed and reaped before the error is raised, so nothing keeps running
    in the working directory after the call returns.

    Args:
        command: The command to execute
        timeout: Timeout in seconds
        working_directory: Optional working directory
        shell: Interpreter invoked as ``<shell> -c <command>``

    Returns:
        Tuple of (stdout, stderr, exit_code)

    Raises:
        ToolExecutionError: If the process cannot be started
        ToolTimeoutError: If command exceeds timeout
    """
    cwd = _resolve_cwd(working_directory)

    try:
        process = subprocess.Popen(
            [shell, "-c", command],
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            cwd=cwd,
            start_new_session=True,
        )
    except OSError as e:
        raise ToolExecutionError(
            f"Failed to execute command: {e}", tool_name=TOOL_NAME
        ) from e

    try:
        stdout, stderr = process.communicate(timeout=timeout)
    except subprocess.TimeoutExpired as e:
        _kill_process_group(process)
        with contextlib.suppress(subprocess.TimeoutExpired):
            process.communicate(timeout=5)
        raise ToolTimeoutError(
            f"Command timed out after {timeout} seconds: {command}",
            timeout=timeout,
            tool_name=TOOL_NAME,
        ) from e

    return stdout, stderr, process.returncode


def reap_background_processes() -> int:
    """Collect background commands that have exited.

    Returns:
        Number of background commands still running.
    """
    for process in list(_BACKGROUND_PROCESSES):
        if process.poll() is not None:
            _BACKGROUND_PROCESSES.discard(process)
    return len(_BACKGROUND_PROCESSES)


def _start_background(
    command: str, working_directory: str | None, shell: str
) -> subprocess.Popen[bytes]:
    cwd = _resolve_cwd(working_directory)
    reap_background_processes()
    try:
        process = subprocess.Popen(
            [shell, "-c", command],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            cwd=cwd,
            start_new_session=True,
        )
    except OSError as e:
        raise ToolExecutionError(
            f"Failed to start background command: {e}", tool_name=TOOL_NAME
        ) from e

    _BACKGROUND_PROCESSES.add(process)
    return process


class RunCommandInput(BaseModel):
    """Arguments accepted by run_command."""

    command: str = Field(min_length=1, description="Command to execute")
    cwd: str | None = Field(default=None, description="Working directory")
    background: bool = Field(default=False, description="Run in background")
    timeout: float | None = Field(
        default=None, gt=0, le=600, description="Timeout in seconds"
    )


def _execute(
    config: ShellToolConfig,
    command: str,
    cwd: str | None,
    background: bool,
    timeout: float | None,
) -> dict[str, Any]:
    classification = check_command(command)

    warning: str | None = None
    if classification.requires_confirmation:
        warning = (
            f"Action requires care: {command} "
            f"(reversibility: {classification.reversibility})"
        )
        if classification.undo_hint:
            warning += f"; to undo: {classification.undo_hint}"
        logger.warning(warning)

    working_directory = cwd or config.working_directory

    if background:
        if not config.allow_background:
            raise ToolExecutionError(
                "Background execution is disabled by configuration",
                tool_name=TOOL_NAME,
            )
        process = _start_background(command, working_directory, config.shell)
        logger.info(f"Started background command (pid {process.pid}): {command}")
        return {
            "pid": process.pid,
            "message": "Started in background",
            "reversibility": classification.reversibility.value,
        }

    actual_timeout = timeout if timeout is not None else config.timeout
    stdout, stderr, exit_code = _run_command(
        command,
        timeout=actual_timeout,
        working_directory=working_directory,
        shell=config.shell,
    )

    return {
        "stdout": stdout.strip(),
        "stderr": stderr.strip(),
        "exit_code": exit_code,
        "reversibility": classification.reversibility.value,
        "undo_hint": classification.undo_hint,
        "warning": warning,
    }


def create_run_command(config: ShellToolConfig | None = None) -> BaseTool:
    """Build a run_command tool bound to ``config``.

    Each registry builds its own tool so that registries with different shell
    settings never share them. Without a config the tool reads the module
    default from :func:`get_shell_config` on every call.

    Example:
        >>> fast = create_run_command(ShellToolConfig(timeout=5))
        >>> fast.invoke({"command": "echo hi"})["stdout"]
        'hi'
    """

    @tool(TOOL_NAME, args_schema=RunCommandInput)
    def run_command(
        command: str,
        cwd: str | None = None,
        background: bool = False,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        """Execute a shell command.

        Commands that could cause irreversible damage are refused. Commands
        that are hard to undo run with a warning and an undo hint in the
        result.
        """
        return _execute(
            config or get_shell_config(), command, cwd, background, timeout
        )

    return run_command


run_command = create_run_command()
