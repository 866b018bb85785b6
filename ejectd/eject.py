"""
Unmount and power off a drive.

The sequence is strictly ordered: list the drive's partitions, unmount every
mounted one, and only power the drive off when all of those unmounts succeeded.
Each command is attempted exactly once.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Protocol

from ejectd.catalog import device_path, first_line, parse_partition_names
from ejectd.config import EjectdSettings, settings as default_settings
from ejectd.queries import DeviceQueries
from ejectd.runner import CommandResult, CommandRunner, SubprocessRunner

logger = logging.getLogger(__name__)


class EjectState(Enum):
    START = "start"
    LISTING_PARTITIONS = "listing_partitions"
    UNMOUNTING = "unmounting"
    POWERING_OFF = "powering_off"
    DONE = "done"
    POWER_OFF_FAILED = "power_off_failed"
    ABORTED_BEFORE_POWER_OFF = "aborted_before_power_off"

    @property
    def is_terminal(self) -> bool:
        return self in (
            EjectState.DONE,
            EjectState.POWER_OFF_FAILED,
            EjectState.ABORTED_BEFORE_POWER_OFF,
        )


@dataclass(frozen=True)
class PartitionOutcome:
    partition: str
    mount_point: str
    unmounted: bool


@dataclass
class EjectResult:
    device: str
    state: EjectState = EjectState.START
    partitions: List[PartitionOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.state is EjectState.DONE

    @property
    def partial_failure(self) -> bool:
        """True when an unmount failed and the drive was left (partly) mounted."""
        return self.state is EjectState.ABORTED_BEFORE_POWER_OFF

    @property
    def power_off_attempted(self) -> bool:
        return self.state in (EjectState.DONE, EjectState.POWER_OFF_FAILED)

    @property
    def failed_partitions(self) -> List[str]:
        return [p.partition for p in self.partitions if not p.unmounted]


class EjectReporter(Protocol):
    def on_unmounting(self, partition: str, mount_point: str) -> None: ...

    def on_unmount_result(self, partition: str, ok: bool) -> None: ...

    def on_power_off(self, device: str) -> None: ...


class SilentReporter:
    def on_unmounting(self, partition: str, mount_point: str) -> None:
        pass

    def on_unmount_result(self, partition: str, ok: bool) -> None:
        pass

    def on_power_off(self, device: str) -> None:
        pass


class DriveActions:
    """The two state-changing commands, both delegated to ``udisksctl``."""

    def __init__(
        self,
        runner: Optional[CommandRunner] = None,
        settings: Optional[EjectdSettings] = None,
    ) -> None:
        self.runner = runner or SubprocessRunner()
        self.settings = settings or default_settings

    def unmount(self, partition: str) -> CommandResult:
        return self.runner.run(
            [self.settings.udisksctl_command, "unmount", "-b", partition]
        )

    def power_off(self, device: str) -> CommandResult:
        return self.runner.run(
            [self.settings.udisksctl_command, "power-off", "-b", device]
        )


class DriveEjector:
    def __init__(
        self,
        queries: DeviceQueries,
        actions: DriveActions,
        reporter: Optional[EjectReporter] = None,
    ) -> None:
        self.queries = queries
        self.actions = actions
        self.reporter = reporter or SilentReporter()

    def _transition(self, result: EjectResult, state: EjectState) -> None:
        logger.debug(f"{result.device}: {result.state.value} -> {state.value}")
        result.state = state

    def eject(self, device: str) -> EjectResult:
        """
        Safely eject ``device``.

        Every mounted partition is unmounted in listing order; a failure does not
        stop the remaining attempts, but it does prevent the power-off.

        Args:
            device: Whole-disk device path, e.g. ``/dev/sdb``.

        Returns:
            An :class:`EjectResult` whose state is DONE, POWER_OFF_FAILED or
            ABORTED_BEFORE_POWER_OFF.
        """
        result = EjectResult(device=device)
        logger.info(f"Ejecting {device}")

        self._transition(result, EjectState.LISTING_PARTITIONS)
        partitions = parse_partition_names(self.queries.partition_listing(device))

        self._transition(result, EjectState.UNMOUNTING)
        for name in partitions:
            partition = device_path(name)
            mount_point = first_line(self.queries.mount_points(partition))
            if not mount_point:
                continue

            self.reporter.on_unmounting(partition, mount_point)
            ok = self.actions.unmount(partition).ok
            self.reporter.on_unmount_result(partition, ok)
            result.partitions.append(PartitionOutcome(partition, mount_point, ok))
            if ok:
                logger.info(f"Unmounted {partition} from {mount_point}")
            else:
                logger.error(f"Failed to unmount {partition} from {mount_point}")

        if result.failed_partitions:
            logger.error(
                f"Not powering off {device}; still mounted: "
                f"{', '.join(result.failed_partitions)}"
            )
            self._transition(result, EjectState.ABORTED_BEFORE_POWER_OFF)
            return result

        self._transition(result, EjectState.POWERING_OFF)
        self.reporter.on_power_off(device)
        if self.actions.power_off(device).ok:
            logger.info(f"Powered off {device}")
            self._transition(result, EjectState.DONE)
        else:
            logger.error(f"Failed to power off {device}")
            self._transition(result, EjectState.POWER_OFF_FAILED)
        return result
