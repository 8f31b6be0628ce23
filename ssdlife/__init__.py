"""SSD lifetime projection from wear telemetry."""

__version__ = "0.1.0"

from ssdlife.aggregator import evaluate
from ssdlife.models import (
    Finding,
    MonthsLeft,
    PhysicalDisk,
    Report,
    Severity,
    WearReading,
)

__all__ = [
    "Finding",
    "MonthsLeft",
    "PhysicalDisk",
    "Report",
    "Severity",
    "WearReading",
    "__version__",
    "evaluate",
]
