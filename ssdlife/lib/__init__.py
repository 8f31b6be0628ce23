"""Shared utility library for ssdlife."""

from ssdlife.lib.process import CommandError, CommandTimeout, check_tool, run_tool

__all__ = [
    "CommandError",
    "CommandTimeout",
    "check_tool",
    "run_tool",
]
