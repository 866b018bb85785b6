"""
Drive catalog.

Turns the text printed by the device queries into :class:`DriveRecord` objects.
The parsing rules are kept as small pure functions so they can be tested
without touching real devices.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ejectd.config import EjectdSettings, settings as default_settings
from ejectd.queries import DeviceQueries

logger = logging.getLogger(__name__)

UNKNOWN_DRIVE = "Unknown Drive"
DEVICE_DIR = "/dev/"


@dataclass(frozen=True)
class DriveRecord:
    """One external block device as seen during a single refresh."""

    device_path: str
    size: str = ""
    model: str = ""
    vendor: str = ""
    transport: str = ""
    mount_points: Tuple[str, ...] = ()

    @property
    def friendly_name(self) -> str:
        return friendly_name(self.vendor, self.model)

    @property
    def connection_type(self) -> str:
        return connection_type(self.transport)

    @property
    def mount_count(self) -> int:
        return len(self.mount_points)

    @property
    def is_mounted(self) -> bool:
        return bool(self.mount_points)


# ----------------------------------------------------------------
# Pure parsing helpers
# ----------------------------------------------------------------
def first_line(text: str) -> str:
    """Everything before the first line terminator."""
    return text.partition("\n")[0]


def device_path(name: str) -> str:
    """Map a kernel name such as ``sdb1`` to its node, ``/dev/sdb1``."""
    return f"{DEVICE_DIR}{name}"


def short_name(device: str) -> str:
    """Inverse of :func:`device_path`: ``/dev/sdb`` -> ``sdb``."""
    if device.startswith(DEVICE_DIR):
        return device[len(DEVICE_DIR):]
    return device


def parse_disk_listing(text: str, root_name: str = "") -> List[str]:
    """
    Pick the disks out of ``lsblk -ndo NAME,TYPE`` output.

    Args:
        text: Raw listing, one ``NAME TYPE`` pair per line.
        root_name: Kernel name of the root device; it is left out.

    Returns:
        Device paths in listing order.
    """
    devices = []
    for line in text.splitlines():
        parts = line.split()
        if len(parts) < 2 or parts[1] != "disk":
            continue
        if parts[0] == root_name:
            continue
        devices.append(device_path(parts[0]))
    return devices


def parse_drive_details(text: str) -> Tuple[str, str, str, str]:
    """
    Split the first line of ``lsblk -no SIZE,MODEL,VENDOR,TRAN`` output.

    Tokens are assigned by position on whitespace, so missing trailing tokens
    simply leave the later fields empty.

    Returns:
        ``(size, model, vendor, transport)``
    """
    tokens = first_line(text).split()[:4]
    tokens += [""] * (4 - len(tokens))
    size, model, vendor, transport = tokens
    return size, model, vendor, transport


def parse_mount_points(text: str, limit: int = 8) -> Tuple[str, ...]:
    """Absolute paths from ``lsblk -no MOUNTPOINT`` output, at most ``limit``."""
    mounts = []
    for line in text.splitlines():
        if len(mounts) >= limit:
            break
        if line.startswith("/"):
            mounts.append(line)
    return tuple(mounts)


def parse_partition_names(text: str) -> List[str]:
    """Sub-device names from ``lsblk -lno NAME``; the first row is the disk itself."""
    return [line.strip() for line in text.splitlines()[1:] if line.strip()]


def friendly_name(vendor: str, model: str) -> str:
    """
    Human readable drive name.

    >>> friendly_name("Seagate", "Desktop")
    'Seagate Desktop'
    >>> friendly_name("", "")
    'Unknown Drive'
    """
    if not vendor and not model:
        return UNKNOWN_DRIVE
    name = model or UNKNOWN_DRIVE
    return f"{vendor} {name}" if vendor else name


def connection_type(transport: str) -> str:
    """Bus label for a transport; anything not SATA or NVMe is shown as USB."""
    if transport == "sata":
        return "SATA"
    if transport == "nvme":
        return "NVMe"
    return "USB"


# ----------------------------------------------------------------
# Catalog construction
# ----------------------------------------------------------------
def resolve_root_name(queries: DeviceQueries) -> str:
    """Kernel name of the disk that holds ``/``, or ``""`` if it cannot be found."""
    source = first_line(queries.root_source()).strip()
    return first_line(queries.parent_name(source)).strip()


def read_drive(
    queries: DeviceQueries, device: str, max_mount_points: int = 8
) -> DriveRecord:
    """Build the record for a single device. A vanished device gives empty fields."""
    size, model, vendor, transport = parse_drive_details(queries.drive_details(device))
    mounts = parse_mount_points(queries.mount_points(device), max_mount_points)
    return DriveRecord(
        device_path=device,
        size=size,
        model=model,
        vendor=vendor,
        transport=transport,
        mount_points=mounts,
    )


def build_catalog(
    queries: DeviceQueries, settings: Optional[EjectdSettings] = None
) -> List[DriveRecord]:
    """
    Enumerate the external drives.

    The root device is excluded and the result is capped at ``max_drives``;
    extra disks are dropped without warning. Every call starts from scratch.
    """
    settings = settings or default_settings
    root_name = resolve_root_name(queries)
    logger.debug(f"Root device: {root_name or '<unresolved>'}")

    catalog: List[DriveRecord] = []
    for device in parse_disk_listing(queries.disk_listing(), root_name):
        if len(catalog) >= settings.max_drives:
            break
        catalog.append(read_drive(queries, device, settings.max_mount_points))

    logger.info(f"Found {len(catalog)} external drive(s)")
    return catalog


def find_drive(catalog: List[DriveRecord], device: str) -> Optional[DriveRecord]:
    """Look a device up by path (``/dev/sdb``) or kernel name (``sdb``)."""
    wanted = short_name(device.strip())
    for record in catalog:
        if short_name(record.device_path) == wanted:
            return record
    return None
