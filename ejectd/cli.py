"""
ejectd command line (Typer + Rich).

Running ``ejectd`` with no arguments starts the interactive ejector. The
``list`` and ``eject`` commands do the same jobs without prompting.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import typer
from rich.console import Console

from ejectd import __version__
from ejectd.app import EXIT_NO_DRIVES, EXIT_OK, EjectdApp
from ejectd.catalog import build_catalog, find_drive
from ejectd.config import EjectdSettings, settings as default_settings
from ejectd.display import Display
from ejectd.eject import DriveActions, DriveEjector
from ejectd.logging_config import setup_logging
from ejectd.queries import DeviceQueries
from ejectd.runner import SubprocessRunner, missing_tools

logger = logging.getLogger("ejectd.cli")

EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130

app = typer.Typer(
    help="Ejectd: safely unmount and power off external drives.",
    add_completion=False,
)


@dataclass
class Runtime:
    settings: EjectdSettings
    display: Display
    queries: DeviceQueries
    ejector: DriveEjector


def build_runtime(
    settings: EjectdSettings, console: Optional[Console] = None
) -> Runtime:
    runner = SubprocessRunner()
    display = Display(console, mount_list_limit=settings.mount_list_limit)
    queries = DeviceQueries(runner, settings)
    ejector = DriveEjector(queries, DriveActions(runner, settings), reporter=display)
    return Runtime(settings, display, queries, ejector)


def guarded(runtime: Runtime, action: Callable[[], int]) -> int:
    """Run ``action`` and translate Ctrl-C and crashes into exit codes."""
    try:
        return action()
    except KeyboardInterrupt:
        runtime.display.console.print()
        runtime.display.warn("Operation cancelled by user")
        logger.warning("Interrupted by user")
        return EXIT_INTERRUPTED
    except Exception as e:
        logger.exception("Unhandled exception")
        runtime.display.error(f"Unexpected error: {e}")
        return EXIT_FAILURE


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"ejectd {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Log level (DEBUG, INFO, WARNING, ...)."
    ),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file", help="Write the rotating log to this file."
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    overrides = {}
    if log_level:
        overrides["log_level"] = log_level
    if log_file:
        overrides["log_file"] = log_file
    settings = default_settings.model_copy(update=overrides)

    runtime = build_runtime(settings)
    setup_logging(settings.log_level, settings.log_file, runtime.display.console)
    logger.debug(f"ejectd {__version__} starting")

    missing = missing_tools(settings.required_tools)
    if missing:
        runtime.display.warn(f"Missing required tools: {', '.join(missing)}")
        logger.warning(f"Missing required tools: {', '.join(missing)}")

    ctx.obj = runtime
    if ctx.invoked_subcommand is None:
        interactive = EjectdApp(
            runtime.queries, runtime.ejector, runtime.display, settings
        )
        raise typer.Exit(guarded(runtime, interactive.run))


@app.command("list")
def list_drives(ctx: typer.Context) -> None:
    """List external drives and exit."""
    runtime: Runtime = ctx.obj

    def action() -> int:
        catalog = build_catalog(runtime.queries, runtime.settings)
        if not catalog:
            runtime.display.show_no_drives()
            return EXIT_NO_DRIVES
        runtime.display.show_drives(catalog)
        return EXIT_OK

    raise typer.Exit(guarded(runtime, action))


@app.command()
def eject(
    ctx: typer.Context,
    device: str = typer.Argument(..., help="Drive to eject, e.g. /dev/sdb or sdb."),
) -> None:
    """Unmount every partition of DEVICE and power it off."""
    runtime: Runtime = ctx.obj

    def action() -> int:
        record = find_drive(build_catalog(runtime.queries, runtime.settings), device)
        if record is None:
            runtime.display.error(f"{device} is not an ejectable external drive.")
            logger.error(f"Refusing to eject {device}: not in the drive catalog")
            return EXIT_USAGE
        runtime.display.show_eject_start(record.device_path)
        result = runtime.ejector.eject(record.device_path)
        runtime.display.show_eject_result(result)
        return EXIT_OK if result.succeeded else EXIT_FAILURE

    raise typer.Exit(guarded(runtime, action))


def main() -> None:
    app()
