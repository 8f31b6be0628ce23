"""
Diagnostic report parsing.

Three report shapes reach this module: the smartctl ATA attribute table,
colon-delimited health logs (nvme-cli plain output and smartctl's NVMe
section), and JSON from ``nvme smart-log -o json``. Each shape is a report
class with a ``normalize()`` method returning the same AttributeRecord, so
nothing downstream knows which tool produced the numbers.
"""

import json
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

from ssdlife.lib.process import CommandError, CommandTimeout, check_tool, run_tool
from ssdlife.models import AttributeRecord, ProbeError

if TYPE_CHECKING:
    from ssdlife.core.config import Config
    from ssdlife.core.context import Context


HEX_VALUE = re.compile(r"^0x[0-9a-f]+$", re.IGNORECASE)
INT_VALUE = re.compile(r"^[+-]?\d+$")
GROUPED_VALUE = re.compile(r"^\d{1,3}(?:[.,]\d{3})+$")
DECIMAL_VALUE = re.compile(r"^[+-]?\d+[.,]\d+$")
BRACKET_UNIT = re.compile(r"\s*\[[^\]]*\]$")
SMARTCTL_HOURS = re.compile(r"^(\d+)h\+")

TABLE_HEADER = re.compile(r"^\s*ID#\s+ATTRIBUTE_NAME")
TABLE_ROW = re.compile(r"^\s*\d+\s+\S+")
LOG_BANNERS = re.compile(
    r"^\s*(?:Smart Log for NVME device|SMART/Health Information"
    r"|=== START OF SMART DATA SECTION ===)",
    re.IGNORECASE,
)

# smartctl messages for devices it cannot talk to at all
UNIDENTIFIED_DEVICE = (
    "Unable to detect device type",
    "Please specify device type",
    "Unknown USB bridge",
)

# smartctl exit status bits 0 and 1: bad command line, device open failed
SMARTCTL_FATAL_BITS = 0b11


def normalize_name(name: str) -> str:
    """Lower-case an attribute name and strip non-alphanumerics."""
    return re.sub(r"[^a-z0-9]", "", name.lower())


def normalize_value(token: Any) -> Any:
    """
    Convert one reported field to a plain number where possible.

    Hex literals are decoded, integers with leading zeros stay decimal,
    grouped thousands (``1,234,567`` or ``1.234.567``) collapse to an int,
    a trailing ``%`` or bracketed unit is dropped. Anything else is
    returned as the stripped string.
    """
    if not isinstance(token, str):
        return token

    text = BRACKET_UNIT.sub("", token.strip())
    if text.endswith("%"):
        text = text[:-1].rstrip()

    if HEX_VALUE.match(text):
        return int(text, 16)
    if INT_VALUE.match(text):
        return int(text, 10)
    if GROUPED_VALUE.match(text):
        return int(re.sub(r"[.,]", "", text))
    if DECIMAL_VALUE.match(text):
        return float(text.replace(",", "."))
    return text


@dataclass
class TabularReport:
    """smartctl ``-A`` attribute table for ATA devices."""

    text: str

    def normalize(self) -> AttributeRecord:
        attributes: dict[str, list[Any]] = {}
        in_table = False

        for line in self.text.splitlines():
            if TABLE_HEADER.match(line):
                in_table = True
                continue
            if not in_table:
                continue
            if not TABLE_ROW.match(line):
                if not line.strip():
                    in_table = False
                continue

            parts = line.split(None, 9)
            if len(parts) < 10:
                continue
            # id, name, flag, value, worst, thresh, type, updated, when_failed, raw
            values = [normalize_value(p) for p in parts[2:9]]
            values.append(_raw_value(parts[9]))
            attributes[normalize_name(parts[1])] = values

        if not attributes:
            raise ValueError("no attribute rows found")
        return AttributeRecord(attributes=attributes, source="tabular")


def _raw_value(raw: str) -> Any:
    """Keep the leading token of a raw value; ``12h+05m+..`` becomes 12."""
    token = raw.split()[0]
    match = SMARTCTL_HOURS.match(token)
    if match:
        return int(match.group(1))
    return normalize_value(token)


@dataclass
class HumanLogReport:
    """Colon-delimited ``key : value`` health log following a banner."""

    text: str

    def normalize(self) -> AttributeRecord:
        lines = self.text.splitlines()
        start = next(
            (i for i, line in enumerate(lines) if LOG_BANNERS.match(line)),
            None,
        )
        if start is None:
            raise ValueError("health log banner not found")

        attributes: dict[str, list[Any]] = {}
        for line in lines[start + 1:]:
            if ":" not in line:
                continue
            key, value = line.split(":", 1)
            name = normalize_name(key)
            if not name:
                continue
            attributes[name] = [normalize_value(value)]

        if not attributes:
            raise ValueError("no attributes after health log banner")
        return AttributeRecord(attributes=attributes, source="human")


@dataclass
class StructuredReport:
    """Self-describing JSON health report."""

    data: dict[str, Any] = field(default_factory=dict)

    def normalize(self) -> AttributeRecord:
        if not isinstance(self.data, dict) or not self.data:
            raise ValueError("structured report is empty")
        attributes: dict[str, list[Any]] = {}
        _flatten(self.data, "", attributes)
        return AttributeRecord(attributes=attributes, source="structured")


def _flatten(data: dict[str, Any], prefix: str, out: dict[str, list[Any]]) -> None:
    for key, value in data.items():
        name = normalize_name(str(key))
        if isinstance(value, dict):
            _flatten(value, prefix + name, out)
            continue
        if isinstance(value, list):
            if any(isinstance(v, (dict, list)) for v in value):
                continue
            values = list(value)
        else:
            values = [value]
        out[prefix + name] = values
        if prefix:
            out.setdefault(name, values)


DiagnosticReport = Union[TabularReport, HumanLogReport, StructuredReport]


def classify_output(text: str) -> DiagnosticReport | None:
    """Pick the report variant for smartctl or nvme-cli text output."""
    for line in text.splitlines():
        if TABLE_HEADER.match(line):
            return TabularReport(text)
        if LOG_BANNERS.match(line):
            return HumanLogReport(text)
    return None


def is_nvme(device: str) -> bool:
    return device.rsplit("/", 1)[-1].startswith("nvme")


def read_attributes(
    device: str,
    context: "Context",
    config: "Config",
) -> AttributeRecord:
    """
    Read and normalize the wear telemetry of one device.

    NVMe devices are probed with ``nvme smart-log -o json``, then the plain
    ``nvme smart-log`` output, then ``smartctl -A``. Other devices go
    straight to ``smartctl -A``.

    Raises:
        ProbeError: If no tool produced a parseable report, a tool timed
            out, or smartctl cannot identify the device
    """
    if is_nvme(device):
        probes = (_probe_nvme_json, _probe_nvme_log, _probe_smartctl)
    else:
        probes = (_probe_smartctl,)

    failures = []
    for probe in probes:
        report, reason = probe(device, context, config)
        if report is None:
            failures.append(reason)
            continue
        try:
            return report.normalize()
        except ValueError as e:
            failures.append(f"{type(report).__name__}: {e}")

    raise ProbeError(
        f"Cannot read wear telemetry for {device}: " + "; ".join(failures)
    )


def _invoke(cmd: list[str], device: str, context: "Context", config: "Config"):
    try:
        return run_tool(
            cmd,
            context,
            timeout=config.command_timeout,
            use_sudo=config.use_sudo,
        )
    except CommandTimeout as e:
        raise ProbeError(f"{device}: {e}") from e
    except CommandError:
        return None


def _probe_nvme_json(device, context, config) -> tuple[DiagnosticReport | None, str]:
    if not check_tool("nvme", context):
        return None, "nvme not found"
    result = _invoke(["nvme", "smart-log", "-o", "json", device],
                     device, context, config)
    if result is None or result.returncode != 0:
        return None, "nvme smart-log -o json unsupported"
    try:
        data = json.loads(result.stdout)
    except json.JSONDecodeError:
        return None, "nvme smart-log -o json returned invalid JSON"
    return StructuredReport(data), ""


def _probe_nvme_log(device, context, config) -> tuple[DiagnosticReport | None, str]:
    if not check_tool("nvme", context):
        return None, "nvme not found"
    result = _invoke(["nvme", "smart-log", device], device, context, config)
    if result is None or result.returncode != 0:
        return None, "nvme smart-log failed"
    return HumanLogReport(result.stdout), ""


def _probe_smartctl(device, context, config) -> tuple[DiagnosticReport | None, str]:
    if not check_tool("smartctl", context):
        return None, "smartctl not found. Install smartmontools package."
    result = _invoke(["smartctl", "-A", device], device, context, config)
    if result is None:
        return None, "smartctl could not be run"

    for message in UNIDENTIFIED_DEVICE:
        if message in result.stdout or message in result.stderr:
            raise ProbeError(f"smartctl cannot identify {device}: {message}")

    if result.returncode & SMARTCTL_FATAL_BITS:
        return None, f"smartctl failed (exit {result.returncode})"

    report = classify_output(result.stdout)
    if report is None:
        return None, "smartctl output not recognized"
    return report, ""
