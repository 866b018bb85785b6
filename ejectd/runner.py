"""
Command execution helpers.

Everything ejectd learns about the system, and everything it does to it, goes
through :class:`CommandRunner`: run a command, capture its text and exit status.
Tests swap in a fake runner that returns canned results.
"""

import logging
import shutil
import subprocess
from dataclasses import dataclass
from typing import Iterable, List, Protocol, Sequence

logger = logging.getLogger(__name__)

# Conventional shell status for "command not found / could not be executed".
LAUNCH_FAILURE = 127


@dataclass(frozen=True)
class CommandResult:
    returncode: int
    stdout: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner(Protocol):
    def run(self, command: Sequence[str]) -> CommandResult: ...


class SubprocessRunner:
    """Runs commands synchronously with :func:`subprocess.run`, one at a time."""

    def run(self, command: Sequence[str]) -> CommandResult:
        """
        Execute a command and wait for it to finish.

        Args:
            command: Argument vector; no shell is involved.

        Returns:
            The exit status and captured stdout. A command that cannot be launched
            yields status 127 and empty output instead of raising.
        """
        args = list(command)
        logger.debug(f"Executing: {' '.join(args)}")
        try:
            result = subprocess.run(
                args,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                check=False,
            )
        except OSError as e:
            logger.warning(f"Could not launch {args[0]}: {e}")
            return CommandResult(LAUNCH_FAILURE, "")

        if result.returncode != 0:
            logger.debug(
                f"Command exited with {result.returncode}: {' '.join(args)}"
                f" stderr={result.stderr.strip()!r}"
            )
        return CommandResult(result.returncode, result.stdout or "")


def missing_tools(tools: Iterable[str]) -> List[str]:
    """Return the tools from ``tools`` that are not found on PATH."""
    return [tool for tool in tools if shutil.which(tool) is None]
