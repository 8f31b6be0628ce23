"""Data model shared by the ssdlife pipeline."""

from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from typing import Any


@total_ordering
class Severity(Enum):
    """Health signal, ordered by escalation level."""

    OK = "ok"
    WARNING = "warning"
    CRITICAL = "critical"
    UNKNOWN = "unknown"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @property
    def exit_code(self) -> int:
        """Monitoring plugin exit code for this severity."""
        return self.rank

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    @classmethod
    def parse(cls, value: "str | Severity") -> "Severity":
        """Parse a severity name such as ``"warning"`` or ``"CRIT"``."""
        if isinstance(value, Severity):
            return value
        text = str(value).strip().lower()
        text = _SEVERITY_ALIASES.get(text, text)
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"Invalid severity: {value!r}") from None


_SEVERITY_RANK = {
    Severity.OK: 0,
    Severity.WARNING: 1,
    Severity.CRITICAL: 2,
    Severity.UNKNOWN: 3,
}

_SEVERITY_ALIASES = {
    "healthy": "ok",
    "warn": "warning",
    "crit": "critical",
}


@dataclass(frozen=True)
class MonthsLeft:
    """Projected months of life: a count or ``many``."""

    count: int | None = None
    abundant: bool = False

    @classmethod
    def of(cls, count: int) -> "MonthsLeft":
        if count < 0:
            raise ValueError(f"Months left cannot be negative: {count}")
        return cls(count=count)

    @classmethod
    def many(cls) -> "MonthsLeft":
        return cls(abundant=True)

    @property
    def is_finite(self) -> bool:
        return self.count is not None

    def to_json(self) -> int | str:
        return self.count if self.count is not None else str(self)

    def __str__(self) -> str:
        if self.abundant:
            return "many"
        return str(self.count)


@dataclass(frozen=True)
class PhysicalDisk:
    """A physical block device found during topology resolution."""

    path: str
    model: str
    rotational: bool = False
    root_host: bool = False


@dataclass
class AttributeRecord:
    """
    Normalized attributes from one diagnostic report.

    Maps a normalized attribute name (lower-case, alphanumerics only) to
    the ordered list of that attribute's scalar fields.
    """

    attributes: dict[str, list[Any]] = field(default_factory=dict)
    source: str = ""

    def __contains__(self, name: str) -> bool:
        return name in self.attributes

    def __len__(self) -> int:
        return len(self.attributes)

    def get(self, name: str) -> list[Any] | None:
        return self.attributes.get(name)

    def field(self, names: tuple[str, ...], index: int) -> Any:
        """
        Return one field from the first attribute among ``names`` that has it.

        Single-field attributes expose their only field for any index.
        Returns None when no alias has a field at that index.
        """
        for name in names:
            values = self.get(name)
            if not values:
                continue
            if len(values) == 1:
                return values[0]
            try:
                return values[index]
            except IndexError:
                continue
        return None


@dataclass(frozen=True)
class WearReading:
    """Wear percentage remaining and accumulated power-on hours."""

    wear_percent: float
    power_on_hours: float


@dataclass(frozen=True)
class Projection:
    """Projected lifetime of one disk."""

    months_left: MonthsLeft
    severity: Severity


@dataclass(frozen=True)
class Finding:
    """Evaluation result for one SSD."""

    disk: PhysicalDisk
    wear_percent: float
    power_on_hours: float
    months_left: MonthsLeft
    severity: Severity

    @property
    def is_root(self) -> bool:
        return self.disk.root_host

    def to_dict(self) -> dict[str, Any]:
        return {
            "device": self.disk.path,
            "model": self.disk.model,
            "wear_percent": self.wear_percent,
            "power_on_hours": self.power_on_hours,
            "months_left": self.months_left.to_json(),
            "severity": self.severity.value,
            "root": self.is_root,
        }


@dataclass
class Report:
    """Overall outcome of one run."""

    severity: Severity
    findings: dict[str, Finding] = field(default_factory=dict)
    worst: Finding | None = None
    message: str = ""
    no_ssds: bool = False
    error: str | None = None

    def table(self) -> str:
        """Semicolon-separated per-disk wear/months table."""
        return "; ".join(
            f"{path}: wear {_format_number(f.wear_percent)}%, "
            f"{f.months_left} months"
            for path, f in self.findings.items()
        )

    def summary(self) -> str:
        """One line naming the worst disk, or the reason there is none."""
        if self.error:
            return self.error
        if self.no_ssds:
            return self.message or "No SSDs present"
        if self.worst is None:
            return f"{len(self.findings)} SSD(s), all with many months left"
        worst = self.worst
        line = (
            f"{worst.disk.path} ({worst.disk.model}) has "
            f"{worst.months_left} months left"
        )
        if worst.is_root:
            line += ", hosts /"
        return line

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.severity.value,
            "summary": self.summary(),
            "worst": self.worst.disk.path if self.worst else None,
            "no_ssds": self.no_ssds,
            "error": self.error,
            "disks": [f.to_dict() for f in self.findings.values()],
        }


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.1f}"


class SsdLifeError(Exception):
    """Base error for ssdlife."""

    pass


class UnknownStateError(SsdLifeError):
    """An irrecoverable condition that makes the whole run UNKNOWN."""

    def __init__(self, message: str, severity: Severity = Severity.UNKNOWN):
        super().__init__(message)
        self.severity = severity


class ListingError(UnknownStateError):
    """The device-listing tool is unavailable or returned nothing."""

    pass


class ProbeError(UnknownStateError):
    """A device's diagnostic report could not be obtained or parsed."""

    pass


class UnsupportedDiskError(UnknownStateError):
    """Wear or power-on hours cannot be derived for a disk."""

    pass
