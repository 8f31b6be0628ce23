"""Tests for Context execution wrapper."""

import subprocess

import pytest

from ssdlife.core.context import Context


class TestContext:
    """Tests for execution context."""

    def test_check_tool_finds_existing(self):
        """check_tool returns True for existing tools."""
        assert Context().check_tool("ls") is True

    def test_check_tool_missing(self):
        """check_tool returns False for missing tools."""
        assert Context().check_tool("nonexistent_tool_xyz") is False

    def test_run_executes_command(self):
        """run() executes command and returns result."""
        result = Context().run(["echo", "hello"])
        assert result.returncode == 0
        assert "hello" in result.stdout

    def test_run_captures_stderr(self):
        """run() captures stderr output."""
        result = Context().run(["ls", "/nonexistent_path_xyz"], check=False)
        assert result.returncode != 0
        assert result.stderr

    def test_run_times_out(self):
        """run() raises TimeoutExpired past the timeout."""
        with pytest.raises(subprocess.TimeoutExpired):
            Context().run(["sleep", "5"], timeout=0.1)
