"""Shared test fixtures."""

import json
import subprocess
import sys
from pathlib import Path
from typing import Any

import pytest

# Add project root to path for test helper imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

FIXTURES_DIR = Path(__file__).parent / "fixtures"

MODEL_LISTING = ("lsblk", "-d", "-n", "-p", "-o", "NAME,MODEL")
DEVICE_LISTING = ("lsblk", "-n", "-p", "-o", "NAME,ROTA,MOUNTPOINT")


class MockContext:
    """Mock Context for testing without real system access."""

    def __init__(
        self,
        tools_available: list[str] | None = None,
        command_outputs: dict[tuple, Any] | None = None,
    ):
        self.tools_available = set(tools_available or [])
        self.command_outputs = command_outputs or {}
        self.commands_run: list[list[str]] = []
        self.timeouts: list[int | None] = []

    def check_tool(self, name: str) -> bool:
        """Check if tool is in mocked available list."""
        return name in self.tools_available

    def run(
        self,
        cmd: list[str],
        check: bool = False,
        timeout: int | None = None,
        **kwargs,
    ) -> subprocess.CompletedProcess:
        """Return mocked command output."""
        self.commands_run.append(cmd)
        self.timeouts.append(timeout)
        key = tuple(cmd)
        if key not in self.command_outputs:
            raise KeyError(f"No mock output for command: {cmd}")

        output = self.command_outputs[key]
        if isinstance(output, Exception):
            raise output

        # Allow passing CompletedProcess directly for more control (e.g., non-zero returncode)
        if isinstance(output, subprocess.CompletedProcess):
            return output

        return subprocess.CompletedProcess(
            cmd,
            returncode=0,
            stdout=output,
            stderr="",
        )


@pytest.fixture
def mock_context():
    """Factory fixture for creating MockContext instances."""
    def _create(**kwargs) -> MockContext:
        return MockContext(**kwargs)
    return _create


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to test fixtures directory."""
    return FIXTURES_DIR


def load_fixture(category: str, name: str) -> str:
    """Load a fixture file by category and name."""
    fixture_path = FIXTURES_DIR / category / name
    if not fixture_path.exists():
        raise FileNotFoundError(f"Fixture not found: {fixture_path}")
    return fixture_path.read_text()


def load_json_fixture(category: str, name: str) -> dict[str, Any]:
    """Load a JSON fixture file."""
    content = load_fixture(category, name)
    return json.loads(content)


def completed(cmd: tuple, stdout: str = "", returncode: int = 0,
              stderr: str = "") -> subprocess.CompletedProcess:
    """Build a CompletedProcess for a mocked command."""
    return subprocess.CompletedProcess(
        list(cmd), returncode=returncode, stdout=stdout, stderr=stderr
    )
