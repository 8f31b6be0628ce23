"""
Physical disk discovery and classification.

Two lsblk reports are combined: a per-disk model listing that yields the
candidate physical disks, and a tree listing of every block device and
partition that tells which candidates are non-rotational and which one
backs the root filesystem.
"""

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ssdlife.lib.process import CommandError, check_tool, run_tool
from ssdlife.models import ListingError, PhysicalDisk

if TYPE_CHECKING:
    from ssdlife.core.config import Config
    from ssdlife.core.context import Context


MODEL_LISTING = ["lsblk", "-d", "-n", "-p", "-o", "NAME,MODEL"]
DEVICE_LISTING = ["lsblk", "-n", "-p", "-o", "NAME,ROTA,MOUNTPOINT"]

# Tree glyphs lsblk draws in front of nested devices (UTF-8 and ASCII modes)
TREE_ROW = re.compile(
    r"^(?P<tree>[\s│├└─|`-]*)(?P<path>/\S+)\s+(?P<rota>[01])(?:\s+(?P<mount>\S.*?))?\s*$"
)
PARTITION_SUFFIX = re.compile(r"\d+")
PARTITION_AFTER_DIGIT = re.compile(r"p\d+")


@dataclass(frozen=True)
class BlockDevice:
    """One row of the block device tree."""

    path: str
    rotational: bool
    mountpoint: str | None
    nested: bool


@dataclass
class Topology:
    """Confirmed SSDs and the device paths hosting ``/``."""

    disks: list[PhysicalDisk] = field(default_factory=list)
    root_devices: frozenset[str] = frozenset()


def is_logical_volume(model: str, sentinels: tuple[str, ...]) -> bool:
    """True if the model string marks a RAID-presented or virtual volume."""
    normalized = " ".join(model.upper().split())
    return any(normalized.startswith(s.upper()) for s in sentinels)


def parse_model_listing(
    text: str,
    sentinels: tuple[str, ...] = ("LOGICAL VOLUME",),
) -> list[tuple[str, str]]:
    """
    Parse ``path model`` rows into candidate physical disks.

    Rows without a model and logical volumes are dropped.

    Returns:
        List of (path, model) tuples in listing order
    """
    candidates = []
    for line in text.splitlines():
        parts = line.strip().split(None, 1)
        if not parts:
            continue
        path = parts[0]
        model = parts[1].strip() if len(parts) > 1 else ""
        if not model or is_logical_volume(model, sentinels):
            continue
        candidates.append((path, model))
    return candidates


def parse_device_tree(text: str) -> list[BlockDevice]:
    """Parse ``NAME ROTA MOUNTPOINT`` rows of the block device tree."""
    devices = []
    for line in text.splitlines():
        if not line.strip():
            continue
        match = TREE_ROW.match(line)
        if not match:
            continue
        devices.append(BlockDevice(
            path=match.group("path"),
            rotational=match.group("rota") == "1",
            mountpoint=match.group("mount"),
            nested=bool(match.group("tree").strip()),
        ))
    return devices


def belongs_to(path: str, disk: str) -> bool:
    """
    True if ``path`` is ``disk`` itself or one of its partitions.

    Disk names ending in a digit take a ``p`` before the partition number
    (``/dev/nvme0n1p1``); others take the number directly (``/dev/sda1``).
    """
    if not path.startswith(disk):
        return False
    suffix = path[len(disk):]
    if not suffix:
        return True
    pattern = PARTITION_AFTER_DIGIT if disk[-1:].isdigit() else PARTITION_SUFFIX
    return pattern.fullmatch(suffix) is not None


def classify_devices(
    candidates: list[tuple[str, str]],
    devices: list[BlockDevice],
) -> Topology:
    """
    Match block devices back to candidate disks.

    A device row confirms a candidate as an SSD when it is the candidate or
    one of its partitions and it is not rotational. A row mounted at ``/``
    marks the most recent top-level device as root-hosting.
    """
    confirmed: set[str] = set()
    root_devices: set[str] = set()
    base: str | None = None

    for device in devices:
        if not device.nested and not (base and belongs_to(device.path, base)):
            base = device.path

        if device.mountpoint == "/" and base is not None:
            root_devices.add(base)

        if device.rotational:
            continue

        for path, _model in candidates:
            if belongs_to(device.path, path):
                confirmed.add(path)

    disks = [
        PhysicalDisk(path=path, model=model, root_host=path in root_devices)
        for path, model in sorted(candidates)
        if path in confirmed
    ]
    return Topology(disks=disks, root_devices=frozenset(root_devices))


def resolve_topology(context: "Context", config: "Config") -> Topology:
    """
    List physical disks and keep the non-rotational ones.

    Raises:
        ListingError: If lsblk is missing, fails, or either listing is empty
    """
    model_text = _list(MODEL_LISTING, context, config)
    if not model_text.strip():
        raise ListingError("lsblk returned no devices")

    candidates = parse_model_listing(model_text, config.logical_volume_models)
    if not candidates:
        return Topology()

    devices = parse_device_tree(_list(DEVICE_LISTING, context, config))
    if not devices:
        raise ListingError("lsblk returned no block device tree")
    return classify_devices(candidates, devices)


def _list(cmd: list[str], context: "Context", config: "Config") -> str:
    if not check_tool("lsblk", context):
        raise ListingError("lsblk not found. Install util-linux package.")
    try:
        result = run_tool(cmd, context, timeout=config.command_timeout)
    except CommandError as e:
        raise ListingError(f"Failed to list disks: {e}") from e
    if result.returncode != 0:
        raise ListingError(
            f"lsblk failed (exit {result.returncode}): {result.stderr.strip()}"
        )
    return result.stdout
