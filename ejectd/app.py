"""Interactive drive-selection loop."""

import logging
import time
from typing import Callable, Optional

from ejectd.catalog import build_catalog
from ejectd.config import EjectdSettings, settings as default_settings
from ejectd.display import Display
from ejectd.eject import DriveEjector
from ejectd.queries import DeviceQueries

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NO_DRIVES = 1

QUIT = "q"
REFRESH = "r"


def parse_selection(choice: str, drive_count: int) -> Optional[int]:
    """
    Map a menu choice to a 0-based catalog index.

    Returns ``None`` for anything that is not a whole number in ``1..drive_count``.
    """
    choice = choice.strip()
    # ASCII digits only: int() would also take "+1", "1_0" and non-Latin digits
    if not (choice.isascii() and choice.isdigit()):
        return None
    number = int(choice)
    if 1 <= number <= drive_count:
        return number - 1
    return None


class EjectdApp:
    """
    The ``Listing -> AwaitingChoice -> ...`` loop.

    The catalog is rebuilt from scratch on every pass: at start-up, on ``r``,
    after an eject attempt and after an invalid choice.
    """

    def __init__(
        self,
        queries: DeviceQueries,
        ejector: DriveEjector,
        display: Display,
        settings: Optional[EjectdSettings] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.queries = queries
        self.ejector = ejector
        self.display = display
        self.settings = settings or default_settings
        self.sleep = sleep

    def run(self) -> int:
        """Run until the operator quits; returns the process exit code."""
        logger.info("Interactive session started")
        while True:
            catalog = build_catalog(self.queries, self.settings)
            self.display.show_header()

            if not catalog:
                self.display.show_no_drives()
                self.display.pause("Press Enter to exit...")
                logger.info("No external drives found, exiting")
                return EXIT_NO_DRIVES

            self.display.show_drives(catalog)
            self.display.show_menu(len(catalog))

            try:
                choice = self.display.ask_choice().strip().lower()
            except EOFError:
                logger.info("End of input, exiting")
                return EXIT_OK

            if choice == QUIT:
                self.display.show_goodbye()
                logger.info("Interactive session ended by operator")
                return EXIT_OK
            if choice == REFRESH:
                continue

            index = parse_selection(choice, len(catalog))
            if index is None:
                logger.debug(f"Invalid selection: {choice!r}")
                self.display.show_invalid_selection()
                self.sleep(self.settings.invalid_choice_delay)
                continue

            self.eject(catalog[index].device_path)

    def eject(self, device: str) -> None:
        self.display.show_header()
        self.display.show_eject_start(device)
        result = self.ejector.eject(device)
        self.display.show_eject_result(result)
        self.display.pause()
