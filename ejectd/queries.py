"""
Read-only device queries.

Each method runs one ``lsblk``/``findmnt`` query and hands back its stdout
untouched. A query that fails to run gives back an empty string, which callers
treat as "no data".
"""

from typing import List, Optional

from ejectd.config import EjectdSettings, settings as default_settings
from ejectd.runner import CommandRunner, SubprocessRunner


class DeviceQueries:
    def __init__(
        self,
        runner: Optional[CommandRunner] = None,
        settings: Optional[EjectdSettings] = None,
    ) -> None:
        self.runner = runner or SubprocessRunner()
        self.settings = settings or default_settings

    def _query(self, command: List[str]) -> str:
        return self.runner.run(command).stdout

    def _lsblk(self, *args: str) -> str:
        return self._query([self.settings.lsblk_command, *args])

    def root_source(self) -> str:
        """Source of the filesystem mounted at ``/`` (e.g. ``/dev/sda2``)."""
        return self._query([self.settings.findmnt_command, "-n", "-o", "SOURCE", "/"])

    def parent_name(self, device: str) -> str:
        """Kernel name of the disk that holds ``device``."""
        if not device:
            return ""
        return self._lsblk("-no", "PKNAME", device)

    def disk_listing(self) -> str:
        """``NAME TYPE`` rows for every top-level block device."""
        return self._lsblk("-ndo", "NAME,TYPE")

    def drive_details(self, device: str) -> str:
        """``SIZE MODEL VENDOR TRAN`` rows for ``device`` and its children."""
        return self._lsblk("-no", "SIZE,MODEL,VENDOR,TRAN", device)

    def mount_points(self, device: str) -> str:
        """Mount points of ``device`` and its partitions, one per line."""
        return self._lsblk("-no", "MOUNTPOINT", device)

    def partition_listing(self, device: str) -> str:
        """Names of ``device`` and every sub-device, the device itself first."""
        return self._lsblk("-lno", "NAME", device)
