"""Tests for process utilities."""

import subprocess

import pytest

from ssdlife.lib.process import (
    CommandError,
    CommandTimeout,
    build_command,
    check_tool,
    run_tool,
)
from tests.conftest import completed


class TestBuildCommand:
    """Tests for build_command."""

    def test_plain(self):
        """Commands are unchanged without sudo."""
        assert build_command(["smartctl", "-A"]) == ["smartctl", "-A"]

    def test_sudo(self):
        """sudo -n is prepended when requested."""
        assert build_command(["smartctl"], use_sudo=True) == ["sudo", "-n", "smartctl"]


class TestRunTool:
    """Tests for run_tool function."""

    def test_returns_completed_process(self, mock_context):
        """The completed process is returned."""
        ctx = mock_context(command_outputs={("echo", "hello"): "hello\n"})

        result = run_tool(["echo", "hello"], context=ctx)

        assert result.stdout == "hello\n"

    def test_nonzero_exit_is_returned(self, mock_context):
        """A nonzero exit is not an error."""
        cmd = ("smartctl", "-A", "/dev/sda")
        ctx = mock_context(command_outputs={cmd: completed(cmd, returncode=4)})

        assert run_tool(list(cmd), context=ctx).returncode == 4

    def test_timeout_raises(self, mock_context):
        """A timeout raises CommandTimeout."""
        ctx = mock_context(
            command_outputs={("sleep",): subprocess.TimeoutExpired("sleep", 3)},
        )

        with pytest.raises(CommandTimeout, match="timed out after 3s"):
            run_tool(["sleep"], context=ctx, timeout=3)

    def test_missing_binary_raises(self, mock_context):
        """A missing binary raises CommandError."""
        ctx = mock_context(
            command_outputs={("smartctl",): FileNotFoundError("smartctl")},
        )

        with pytest.raises(CommandError, match="Command failed"):
            run_tool(["smartctl"], context=ctx)

    def test_passes_timeout(self, mock_context):
        """The timeout reaches the context."""
        ctx = mock_context(command_outputs={("true",): ""})

        run_tool(["true"], context=ctx, timeout=7)

        assert ctx.timeouts == [7]


class TestCheckTool:
    """Tests for check_tool function."""

    def test_returns_true_for_available_tool(self, mock_context):
        """Returns True when the tool exists."""
        ctx = mock_context(tools_available=["smartctl"])
        assert check_tool("smartctl", context=ctx) is True

    def test_returns_false_for_missing_tool(self, mock_context):
        """Returns False when the tool is missing."""
        ctx = mock_context(tools_available=[])
        assert check_tool("nonexistent", context=ctx) is False

    def test_raises_when_required(self, mock_context):
        """Raises when a required tool is missing."""
        ctx = mock_context(tools_available=[])
        with pytest.raises(CommandError, match="Required tool"):
            check_tool("smartctl", required=True, context=ctx)
