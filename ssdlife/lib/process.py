"""Process utilities for diagnostic tools."""

import subprocess
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ssdlife.core.context import Context


class CommandError(Exception):
    """Error running a command."""

    pass


class CommandTimeout(CommandError):
    """A command did not finish within its timeout."""

    pass


def build_command(cmd: list[str], use_sudo: bool = False) -> list[str]:
    """Prefix a command with non-interactive sudo when requested."""
    if use_sudo:
        return ["sudo", "-n"] + cmd
    return list(cmd)


def run_tool(
    cmd: list[str],
    context: "Context | None" = None,
    timeout: int | None = 30,
    use_sudo: bool = False,
) -> subprocess.CompletedProcess:
    """
    Run a diagnostic tool and return the completed process.

    A non-zero exit status is not an error here; callers decide what the
    status means for their tool.

    Args:
        cmd: Command and arguments
        context: Execution context (for testing)
        timeout: Timeout in seconds
        use_sudo: Run through sudo -n

    Returns:
        CompletedProcess with stdout, stderr, returncode

    Raises:
        CommandTimeout: If the tool does not finish in time
        CommandError: If the tool cannot be started
    """
    if context is None:
        from ssdlife.core.context import Context
        context = Context()

    full_cmd = build_command(cmd, use_sudo)
    try:
        return context.run(full_cmd, check=False, timeout=timeout)
    except subprocess.TimeoutExpired as e:
        raise CommandTimeout(
            f"Command timed out after {timeout}s: {' '.join(full_cmd)}"
        ) from e
    except OSError as e:
        raise CommandError(f"Command failed: {' '.join(full_cmd)}: {e}") from e


def check_tool(
    name: str,
    context: "Context | None" = None,
    required: bool = False,
) -> bool:
    """
    Check if a tool exists in PATH.

    Args:
        name: Tool name to check
        context: Execution context (for testing)
        required: Raise if tool is missing

    Returns:
        True if tool exists

    Raises:
        CommandError: If required=True and tool is missing
    """
    if context is None:
        from ssdlife.core.context import Context
        context = Context()

    exists = context.check_tool(name)

    if required and not exists:
        raise CommandError(f"Required tool not found: {name}")

    return exists
