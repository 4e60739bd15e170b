"""Tests for the run_command shell tool."""

import logging
import time
from pathlib import Path

import pytest
from pydantic import ValidationError

from sharkbait.ai.tools.base import Reversibility
from sharkbait.ai.tools.exceptions import (
    BlockedCommandError,
    IrreversibleActionError,
    ToolExecutionError,
    ToolTimeoutError,
)
from sharkbait.ai.tools.implementations import shell
from sharkbait.ai.tools.implementations.shell import (
    check_command,
    create_run_command,
    get_shell_config,
    reap_background_processes,
    run_command,
    set_shell_config,
)
from sharkbait.config.models import ShellToolConfig


@pytest.fixture
def fake_runner(monkeypatch):
    """Replace the subprocess runner and record what it was asked to run."""
    calls = []

    def runner(command, timeout, working_directory=None, shell="/bin/bash"):
        calls.append(
            {
                "command": command,
                "timeout": timeout,
                "working_directory": working_directory,
                "shell": shell,
            }
        )
        return "  out  \n", "", 0

    monkeypatch.setattr(shell, "_run_command", runner)
    return calls


# Test policy checks


class TestCheckCommand:
    """Tests for check_command."""

    def test_blocked_command_raises(self):
        """Test a hard-blocked command is refused with its rule."""
        with pytest.raises(BlockedCommandError) as exc_info:
            check_command("rm -rf /")

        error = exc_info.value
        assert error.code == "blocked_command"
        assert error.tool_name == "run_command"
        assert error.command == "rm -rf /"
        assert error.rule is not None
        assert "refused outright" in error.message
        assert "rm -rf /" in error.message

    def test_irreversible_command_raises(self):
        """Test an irreversible but non-blocked command awaits confirmation."""
        with pytest.raises(IrreversibleActionError) as exc_info:
            check_command("rm -rf /tmp/build")

        error = exc_info.value
        assert error.code == "irreversible_action"
        assert error.classification.reversibility is Reversibility.IRREVERSIBLE
        assert "Please confirm manually" in error.message

    def test_blocked_check_precedes_irreversible_check(self):
        """Test a command matching both tables reports the blocking rule."""
        with pytest.raises(BlockedCommandError):
            check_command("mkfs.ext4 /dev/sda1")

    def test_allowed_command_returns_classification(self):
        """Test allowed commands return their classification."""
        result = check_command("git push --force origin main")

        assert result.reversibility is Reversibility.EFFORT
        assert result.requires_confirmation is True
        assert result.undo_hint == "git reflog + push"


# Test configuration


class TestShellConfig:
    """Tests for module-level shell config."""

    def test_default_config(self):
        """Test a default config is returned when none is set."""
        config = get_shell_config()

        assert config.timeout == 30.0
        assert config.shell == "/bin/bash"

    def test_set_config(self):
        """Test configured values are picked up."""
        set_shell_config(ShellToolConfig(timeout=5))

        assert get_shell_config().timeout == 5

    def test_bound_config_ignores_default(self, fake_runner):
        """Test a tool built with a config keeps it whatever the default is."""
        bound = create_run_command(ShellToolConfig(timeout=5, shell="/bin/sh"))
        set_shell_config(ShellToolConfig(timeout=300))

        bound.invoke({"command": "echo hi"})
        run_command.invoke({"command": "echo hi"})

        assert [c["timeout"] for c in fake_runner] == [5, 300]
        assert fake_runner[0]["shell"] == "/bin/sh"

    def test_bound_tool_matches_default_schema(self):
        bound = create_run_command(ShellToolConfig())

        assert bound.name == run_command.name == "run_command"
        assert bound.args == run_command.args


# Test execution


class TestRunCommand:
    """Tests for run_command execution."""

    def test_echo(self):
        """Test a simple command returns trimmed output."""
        result = run_command.invoke({"command": "echo hello"})

        assert result["stdout"] == "hello"
        assert result["stderr"] == ""
        assert result["exit_code"] == 0
        assert result["reversibility"] == "effort"
        assert result["warning"] is None

    def test_nonzero_exit_is_reported_not_raised(self):
        """Test a failing command returns its exit code."""
        result = run_command.invoke({"command": "echo oops >&2; exit 3"})

        assert result["exit_code"] == 3
        assert result["stderr"] == "oops"

    def test_easy_command_carries_undo_hint(self, tmp_path):
        """Test classification fields are reported with the output."""
        result = run_command.invoke(
            {"command": "mkdir created", "cwd": str(tmp_path)}
        )

        assert result["exit_code"] == 0
        assert result["reversibility"] == "easy"
        assert result["undo_hint"] == "rmdir"
        assert (tmp_path / "created").is_dir()

    def test_cwd(self, tmp_path):
        """Test the command runs in the requested directory."""
        result = run_command.invoke({"command": "pwd", "cwd": str(tmp_path)})

        assert Path(result["stdout"]).resolve() == tmp_path.resolve()

    def test_configured_working_directory(self, tmp_path):
        """Test the configured directory applies when no cwd is given."""
        set_shell_config(ShellToolConfig(working_directory=str(tmp_path)))

        result = run_command.invoke({"command": "pwd"})

        assert Path(result["stdout"]).resolve() == tmp_path.resolve()

    def test_missing_cwd(self, tmp_path):
        """Test a nonexistent directory fails before anything runs."""
        with pytest.raises(ToolExecutionError, match="does not exist"):
            run_command.invoke(
                {"command": "echo hi", "cwd": str(tmp_path / "missing")}
            )

    def test_cwd_is_file(self, tmp_path):
        """Test a file path is rejected as working directory."""
        target = tmp_path / "file.txt"
        target.write_text("x")

        with pytest.raises(ToolExecutionError, match="not a directory"):
            run_command.invoke({"command": "echo hi", "cwd": str(target)})

    @pytest.mark.parametrize(
        "command", [":(){ :|:& };:", "rm -rf \"/\"", "rm -rf ~/*", "rm -rf $HOME/*"]
    )
    def test_blocked_command_never_runs(self, fake_runner, command):
        """Test a blocked command does not reach the runner."""
        with pytest.raises(BlockedCommandError):
            run_command.invoke({"command": command})

        assert fake_runner == []

    def test_irreversible_command_never_runs(self, fake_runner):
        """Test an irreversible command does not reach the runner."""
        with pytest.raises(IrreversibleActionError):
            run_command.invoke({"command": "rm -rf /tmp/build"})

        assert fake_runner == []

    def test_confirmation_required_runs_with_warning(self, fake_runner, caplog):
        """Test a command needing care runs and reports a warning."""
        with caplog.at_level(logging.WARNING, logger=shell.__name__):
            result = run_command.invoke({"command": "git push --force origin main"})

        assert len(fake_runner) == 1
        assert result["stdout"] == "out"
        assert result["reversibility"] == "effort"
        assert result["undo_hint"] == "git reflog + push"
        assert "git reflog + push" in result["warning"]
        assert any("requires care" in r.message for r in caplog.records)

    def test_configured_timeout_and_shell_are_used(self, fake_runner):
        """Test configured defaults flow to the runner."""
        set_shell_config(ShellToolConfig(timeout=12, shell="/bin/sh"))

        run_command.invoke({"command": "echo hi"})

        assert fake_runner[0]["timeout"] == 12
        assert fake_runner[0]["shell"] == "/bin/sh"

    def test_explicit_timeout_overrides_config(self, fake_runner):
        """Test the per-call timeout takes precedence."""
        run_command.invoke({"command": "echo hi", "timeout": 2.5})

        assert fake_runner[0]["timeout"] == 2.5

    @pytest.mark.parametrize(
        "arguments",
        [
            {},
            {"command": ""},
            {"command": "ls", "timeout": 0},
            {"command": "ls", "timeout": 601},
        ],
    )
    def test_invalid_arguments(self, arguments):
        """Test the input schema rejects bad arguments."""
        with pytest.raises(ValidationError):
            run_command.invoke(arguments)


class TestTimeout:
    """Tests for timeout enforcement."""

    @pytest.mark.slow
    def test_timeout_raises(self):
        """Test a slow command is killed and reported."""
        started = time.monotonic()

        with pytest.raises(ToolTimeoutError) as exc_info:
            run_command.invoke({"command": "sleep 10", "timeout": 0.5})

        assert time.monotonic() - started < 5
        error = exc_info.value
        assert error.code == "timeout"
        assert error.timeout == 0.5
        assert error.tool_name == "run_command"
        assert isinstance(error, ToolExecutionError)

    @pytest.mark.slow
    def test_timeout_kills_child_processes(self, tmp_path):
        """Test nothing from a timed-out command keeps running."""
        marker = tmp_path / "marker"

        with pytest.raises(ToolTimeoutError):
            run_command.invoke(
                {
                    "command": f"(sleep 1; touch {marker}) & sleep 10",
                    "timeout": 0.3,
                }
            )

        time.sleep(1.5)
        assert not marker.exists()


class TestBackground:
    """Tests for background execution."""

    def test_background_returns_pid(self):
        """Test a background command returns immediately with its pid."""
        result = run_command.invoke({"command": "sleep 0.1", "background": True})

        assert isinstance(result["pid"], int)
        assert result["message"] == "Started in background"
        assert result["reversibility"] == "effort"

    def test_background_process_is_tracked_until_reaped(self):
        """Test background handles are kept and collected once they exit."""
        result = run_command.invoke({"command": "sleep 0.1", "background": True})

        (process,) = [
            p for p in shell._BACKGROUND_PROCESSES if p.pid == result["pid"]
        ]
        process.wait(timeout=5)
        reap_background_processes()

        assert process not in shell._BACKGROUND_PROCESSES

    def test_background_disabled(self):
        """Test background execution can be turned off."""
        set_shell_config(ShellToolConfig(allow_background=False))

        with pytest.raises(ToolExecutionError, match="disabled"):
            run_command.invoke({"command": "sleep 0.1", "background": True})

    def test_background_still_checks_policy(self):
        """Test background mode does not bypass blocking."""
        with pytest.raises(BlockedCommandError):
            run_command.invoke({"command": "rm -rf ~", "background": True})
