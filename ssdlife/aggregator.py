"""Evaluate every SSD and reduce the results to one report."""

from typing import TYPE_CHECKING

from ssdlife.core.config import Config
from ssdlife.core.logging import NullLogger
from ssdlife.models import (
    Finding,
    PhysicalDisk,
    Report,
    Severity,
    UnknownStateError,
    UnsupportedDiskError,
)
from ssdlife.projection import project_lifetime
from ssdlife.telemetry import read_attributes
from ssdlife.topology import resolve_topology
from ssdlife.wear import extract_wear

if TYPE_CHECKING:
    from ssdlife.core.context import Context
    from ssdlife.core.logging import RunLogger


NO_SSDS_MESSAGE = "No SSDs present"


def evaluate_disk(
    disk: PhysicalDisk,
    root_devices: frozenset[str],
    context: "Context",
    config: Config,
    logger: "RunLogger",
) -> Finding:
    """Parse, extract and project one disk."""
    record = read_attributes(disk.path, context, config)
    logger.debug(
        "Telemetry read",
        device=disk.path,
        source=record.source,
        attributes=len(record),
    )
    try:
        reading = extract_wear(record, disk.path, root_devices)
    except UnsupportedDiskError as e:
        e.severity = config.unsupported_severity
        raise

    projection = project_lifetime(
        reading.power_on_hours,
        reading.wear_percent,
        disk.root_host,
        config,
    )
    return Finding(
        disk=disk,
        wear_percent=reading.wear_percent,
        power_on_hours=reading.power_on_hours,
        months_left=projection.months_left,
        severity=projection.severity,
    )


def worst_finding(findings: list[Finding]) -> Finding | None:
    """Finding with the fewest finite months left; earliest path on ties."""
    finite = [f for f in findings if f.months_left.is_finite]
    if not finite:
        return None
    return min(finite, key=lambda f: (f.months_left.count, f.disk.path))


def aggregate(findings: list[Finding]) -> Report:
    ordered = sorted(findings, key=lambda f: f.disk.path)
    return Report(
        severity=max((f.severity for f in ordered), default=Severity.OK),
        findings={f.disk.path: f for f in ordered},
        worst=worst_finding(ordered),
    )


def evaluate(
    context: "Context",
    config: Config | None = None,
    logger: "RunLogger | None" = None,
) -> Report:
    """
    Run the whole pipeline once.

    Any disk that cannot be fully evaluated ends the run with that error's
    severity and no findings.

    Args:
        context: Execution context
        config: Thresholds and tool settings (default: built-in defaults)
        logger: Run logger (default: discard)

    Returns:
        Report for the monitoring console
    """
    config = config or Config()
    logger = logger or NullLogger()

    try:
        topology = resolve_topology(context, config)
        logger.debug(
            "Topology resolved",
            disks=[d.path for d in topology.disks],
            root_devices=sorted(topology.root_devices),
        )

        if not topology.disks:
            logger.info(NO_SSDS_MESSAGE, severity=config.no_ssd_severity.value)
            return Report(
                severity=config.no_ssd_severity,
                message=NO_SSDS_MESSAGE,
                no_ssds=True,
            )

        findings = []
        for disk in topology.disks:
            finding = evaluate_disk(
                disk, topology.root_devices, context, config, logger
            )
            if finding.severity == Severity.OK:
                logger.info("Disk evaluated", **finding.to_dict())
            else:
                logger.warning("Disk evaluated", **finding.to_dict())
            findings.append(finding)
    except UnknownStateError as e:
        logger.error(str(e), severity=e.severity.value)
        return Report(severity=e.severity, error=str(e))

    report = aggregate(findings)
    logger.info(
        report.summary(),
        severity=report.severity.value,
        table=report.table(),
    )
    return report
