"""Derive one wear percentage from vendor-specific attributes."""

from dataclasses import dataclass
from typing import Any, Callable

from ssdlife.models import AttributeRecord, UnsupportedDiskError, WearReading


# Fields of a smartctl attribute row after the name
VALUE_FIELD = 1
RAW_FIELD = -1


@dataclass(frozen=True)
class WearRule:
    """One candidate source of the wear percentage."""

    label: str
    names: tuple[str, ...]
    index: int
    convert: Callable[[float], float] = lambda value: value


# Highest priority first. The standardized NVMe metric is least ambiguous;
# a vendor's specific wear-leveling counter beats the generic wearout
# indicator some devices report next to it.
WEAR_RULES: tuple[WearRule, ...] = (
    WearRule(
        label="percentage used",
        names=("percentageused", "percentused"),
        index=RAW_FIELD,
        convert=lambda used: 100 - used,
    ),
    WearRule(
        label="wear leveling count",
        names=("wearlevelingcount",),
        index=VALUE_FIELD,
    ),
    WearRule(
        label="media wearout indicator",
        names=("mediawearoutindicator",),
        index=VALUE_FIELD,
    ),
)

POWER_ON_HOURS = ("poweronhours", "powerontimehours")


def _number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    return None


def power_on_hours(record: AttributeRecord) -> float | None:
    """Hours from the last field of the power-on hours attribute."""
    return _number(record.field(POWER_ON_HOURS, RAW_FIELD))


def wear_percent(
    record: AttributeRecord,
    rules: tuple[WearRule, ...] = WEAR_RULES,
) -> tuple[float, str] | None:
    """
    Apply the wear rules in order.

    Returns:
        (wear percent remaining, rule label) of the first rule whose
        attribute holds a number, or None
    """
    for rule in rules:
        value = _number(record.field(rule.names, rule.index))
        if value is not None:
            return rule.convert(value), rule.label
    return None


def extract_wear(
    record: AttributeRecord,
    device: str,
    root_devices: frozenset[str] = frozenset(),
) -> WearReading:
    """
    Derive wear remaining and power-on hours for a device.

    Raises:
        UnsupportedDiskError: If either value is missing or either is zero
            or negative
    """
    where = f"{device} (root disk)" if device in root_devices else device

    hours = power_on_hours(record)
    if hours is None:
        raise UnsupportedDiskError(f"{where}: power-on hours not reported")
    if hours <= 0:
        raise UnsupportedDiskError(f"{where}: invalid power-on hours {hours}")

    found = wear_percent(record)
    if found is None:
        raise UnsupportedDiskError(f"{where}: no supported wear attribute")
    wear, label = found
    if wear <= 0:
        raise UnsupportedDiskError(
            f"{where}: invalid wear {wear}% derived from {label}"
        )

    return WearReading(wear_percent=wear, power_on_hours=hours)
