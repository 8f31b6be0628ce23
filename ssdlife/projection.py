"""Lifetime projection from wear and power-on hours."""

import math
from typing import TYPE_CHECKING

from ssdlife.models import MonthsLeft, Projection, Severity

if TYPE_CHECKING:
    from ssdlife.core.config import Config


HOURS_PER_MONTH = 24 * 30

# Above this much wear remaining the extrapolation is too noisy to use
ABUNDANT_WEAR = 90


def project_months(power_on_hours: float, wear_percent: float) -> MonthsLeft:
    """
    Extrapolate months left from the hours spent per percent of wear.

    One percent is taken off the remaining wear first, so a disk with 1%
    left never projects any months.
    """
    if wear_percent <= 0:
        raise ValueError(f"wear_percent must be positive, got {wear_percent}")
    if power_on_hours <= 0:
        raise ValueError(f"power_on_hours must be positive, got {power_on_hours}")

    if wear_percent > ABUNDANT_WEAR:
        return MonthsLeft.many()

    remaining = wear_percent - 1
    used = 100 - remaining
    months = math.floor(power_on_hours * remaining / (used * HOURS_PER_MONTH))
    return MonthsLeft.of(max(0, months))


def months_severity(
    months_left: MonthsLeft,
    is_root: bool,
    warn_months: int,
    crit_months: int,
) -> Severity:
    if not months_left.is_finite:
        return Severity.OK
    if months_left.count < crit_months:
        return Severity.CRITICAL
    if months_left.count < warn_months:
        return Severity.CRITICAL if is_root else Severity.WARNING
    return Severity.OK


def percent_severity(
    wear_percent: float,
    warn_percent: float | None,
    crit_percent: float | None,
) -> Severity:
    if crit_percent is not None and wear_percent <= crit_percent:
        return Severity.CRITICAL
    if warn_percent is not None and wear_percent <= warn_percent:
        return Severity.WARNING
    return Severity.OK


def project_lifetime(
    power_on_hours: float,
    wear_percent: float,
    is_root: bool,
    config: "Config",
) -> Projection:
    """
    Project months left and grade them against the configured thresholds.

    Args:
        power_on_hours: Accumulated power-on hours
        wear_percent: Wear remaining, in (0, 100]
        is_root: Disk backs the root filesystem
        config: Month and optional percentage thresholds

    Returns:
        Projection with the more severe of the month and percent checks
    """
    months_left = project_months(power_on_hours, wear_percent)
    severity = max(
        percent_severity(wear_percent, config.warn_percent, config.crit_percent),
        months_severity(
            months_left, is_root, config.warn_months, config.crit_months
        ),
    )
    return Projection(months_left=months_left, severity=severity)
