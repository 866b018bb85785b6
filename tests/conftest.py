# tests/conftest.py
import io
from typing import Dict, List, Optional

import pytest
from rich.console import Console

from ejectd.config import EjectdSettings
from ejectd.display import Display
from ejectd.eject import DriveActions, DriveEjector
from ejectd.queries import DeviceQueries
from ejectd.runner import CommandResult

ROOT_QUERY = ("findmnt", "-n", "-o", "SOURCE", "/")
DISK_LISTING = ("lsblk", "-ndo", "NAME,TYPE")


class FakeRunner:
    """Canned command results keyed by argument vector; records every call."""

    def __init__(self) -> None:
        self.responses: Dict[tuple, CommandResult] = {}
        self.calls: List[tuple] = []

    def set(self, command, stdout: str = "", returncode: int = 0) -> None:
        self.responses[tuple(command)] = CommandResult(returncode, stdout)

    def run(self, command) -> CommandResult:
        self.calls.append(tuple(command))
        return self.responses.get(tuple(command), CommandResult(0, ""))

    def called(self, *command: str) -> bool:
        return tuple(command) in self.calls

    def calls_to(self, program: str) -> List[tuple]:
        return [call for call in self.calls if call[0] == program]

    # Helpers describing a simulated system -------------------------------
    def set_root(self, source: str = "/dev/sda2", parent: str = "sda") -> None:
        self.set(ROOT_QUERY, f"{source}\n")
        self.set(("lsblk", "-no", "PKNAME", source), f"{parent}\n")

    def set_disks(self, *rows: str) -> None:
        self.set(DISK_LISTING, "".join(f"{row}\n" for row in rows))

    def add_drive(
        self,
        device: str,
        details: str = "",
        mounts: Optional[List[str]] = None,
        partitions: Optional[Dict[str, str]] = None,
    ) -> None:
        """
        Describe one drive.

        ``partitions`` maps kernel names (``sdb1``) to their mount point, ``""``
        meaning not mounted.
        """
        partitions = partitions or {}
        mounts = mounts if mounts is not None else [m for m in partitions.values() if m]
        name = device.rsplit("/", 1)[-1]
        self.set(("lsblk", "-no", "SIZE,MODEL,VENDOR,TRAN", device), f"{details}\n")
        # lsblk prints an empty line for every unmounted device in the tree
        mount_lines = [""] + mounts
        self.set(
            ("lsblk", "-no", "MOUNTPOINT", device),
            "".join(f"{m}\n" for m in mount_lines),
        )
        self.set(
            ("lsblk", "-lno", "NAME", device),
            "".join(f"{n}\n" for n in [name, *partitions]),
        )
        for part, mount_point in partitions.items():
            self.set(("lsblk", "-no", "MOUNTPOINT", f"/dev/{part}"), f"{mount_point}\n")

    def set_unmount(self, partition: str, returncode: int) -> None:
        self.set(("udisksctl", "unmount", "-b", partition), "", returncode)

    def set_power_off(self, device: str, returncode: int) -> None:
        self.set(("udisksctl", "power-off", "-b", device), "", returncode)


class ScriptedInput:
    """Stands in for the operator: hands out answers, then raises EOFError."""

    def __init__(self, *answers: str) -> None:
        self.answers = list(answers)
        self.prompts: List[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


@pytest.fixture
def settings():
    return EjectdSettings(_env_file=None)


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def queries(fake_runner, settings):
    return DeviceQueries(fake_runner, settings)


@pytest.fixture
def console():
    return Console(
        file=io.StringIO(), width=100, force_terminal=False, color_system=None
    )


@pytest.fixture
def output(console):
    """Everything written to the test console so far."""
    return lambda: console.file.getvalue()


@pytest.fixture
def display(console):
    return Display(console, input_func=ScriptedInput())


@pytest.fixture
def ejector(fake_runner, queries, settings, display):
    return DriveEjector(queries, DriveActions(fake_runner, settings), reporter=display)


@pytest.fixture
def sandisk_system(fake_runner):
    """Scenario A: root on /dev/sda, one unmounted SanDisk stick on /dev/sdb."""
    fake_runner.set_root("/dev/sda2", "sda")
    fake_runner.set_disks("sda disk", "sdb disk")
    fake_runner.add_drive("/dev/sda", "238.5G Samsung_SSD ATA sata", ["/", "/boot/efi"])
    fake_runner.add_drive("/dev/sdb", "14.3G Ultra SanDisk usb", partitions={"sdb1": ""})
    return fake_runner


@pytest.fixture
def make_input():
    return ScriptedInput
