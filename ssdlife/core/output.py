"""Structured output helper for reports."""

import json
from typing import Any


STATUS_LABELS = {
    "ok": "OK",
    "warning": "WARNING",
    "critical": "CRITICAL",
    "unknown": "UNKNOWN",
}


class Output:
    """Helper for structured report output."""

    def __init__(self):
        self.data: dict[str, Any] = {}
        self._summary: str | None = None
        self._printed: bool = False

    def emit(self, data: dict[str, Any]) -> None:
        """Store structured output data."""
        self.data.update(data)

    def set_summary(self, summary: str) -> None:
        """Set a one-line summary."""
        self._summary = summary

    @property
    def summary(self) -> str:
        """Get summary, or "ok" if none was set."""
        return self._summary or "ok"

    def to_json(self) -> str:
        """Return data as JSON string."""
        return json.dumps(self.data, indent=2, default=str)

    def to_plain(self) -> str:
        """
        Return data as plain text.

        The first line is ``SSDLIFE <STATUS> - <summary>``, followed by the
        per-disk table when one was emitted.
        """
        status = self.data.get("status", "unknown")
        label = STATUS_LABELS.get(status, status.upper())
        lines = [f"SSDLIFE {label} - {self.summary}"]

        table = self.data.get("table")
        if table:
            lines.append(table)

        return "\n".join(lines)

    def render(self, format: str = "plain") -> None:
        """Print output in the specified format.

        Args:
            format: Output format - "json" or "plain"
        """
        if self._printed:
            return
        self._printed = True

        if format == "json":
            print(self.to_json())
        else:
            print(self.to_plain())
