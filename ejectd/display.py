"""
Terminal presentation.

All operator-facing output goes through :class:`Display`, which writes styled text
to a Rich console. The display also reads the operator's input, so the rest of
the program never touches stdin or stdout directly.
"""

import shutil
from typing import Callable, List, Optional

import pyfiglet
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from ejectd.catalog import DriveRecord
from ejectd.eject import EjectResult, EjectState
from ejectd.theme import DEFAULT_THEME, UITheme

InputFunc = Callable[[str], str]


def mount_status(
    record: DriveRecord, icons=DEFAULT_THEME.icons, list_limit: int = 3
) -> str:
    """Plain status text: ``Mounted``/``Not mounted``, plus a count past ``list_limit``."""
    if not record.is_mounted:
        return f"{icons.unmounted} Not mounted"
    status = f"{icons.mounted} Mounted"
    if record.mount_count > list_limit:
        status += f" ({record.mount_count} locations)"
    return status


class Display:
    def __init__(
        self,
        console: Optional[Console] = None,
        theme: UITheme = DEFAULT_THEME,
        input_func: Optional[InputFunc] = None,
        mount_list_limit: int = 3,
    ) -> None:
        self.theme = theme
        self.icons = theme.icons
        self.console = console or Console()
        self.console.push_theme(theme.rich_theme())
        self._input = input_func or (lambda prompt: self.console.input(prompt))
        self.mount_list_limit = mount_list_limit

    # ------------------------------------------------------------
    # Header and drive listing
    # ------------------------------------------------------------
    def _banner(self) -> Text:
        width = min(shutil.get_terminal_size((80, 24)).columns, self.console.width) - 6
        ascii_art = ""
        for font in self.theme.figlet_fonts:
            try:
                ascii_art = pyfiglet.Figlet(font=font, width=max(width, 20)).renderText(
                    self.theme.title
                )
            except pyfiglet.FontNotFound:
                continue
            if ascii_art.strip():
                break
        lines = [line for line in ascii_art.splitlines() if line.strip()]
        return Text("\n".join(lines) or self.theme.title, style="title")

    def show_header(self) -> None:
        self.console.clear()
        self.console.print(
            Panel(
                self._banner(),
                title=Text(
                    f"{self.icons.eject} {self.theme.title} {self.icons.eject}",
                    style="title",
                ),
                subtitle=Text("External Drive Ejector", style="subtitle"),
                border_style="border",
                box=box.ROUNDED,
                expand=False,
            )
        )
        self.console.print(f"[subtitle]{self.theme.subtitle}[/]\n")

    def rule(self) -> None:
        self.console.print(f"[rule]{'─' * self.theme.rule_width}[/]")

    def show_no_drives(self) -> None:
        self.console.print(f"[error]{self.icons.error} No external drives found.[/]\n")

    def show_drive(self, index: int, record: DriveRecord) -> None:
        """Print one numbered drive block; ``index`` is 1-based."""
        conn_type = record.connection_type
        conn_icon = self.icons.connection(conn_type)
        status_style = "mounted" if record.is_mounted else "unmounted"
        tree, last = self.icons.branch, self.icons.last_branch

        self.console.print(
            f"[index]\\[{index}][/] {conn_icon} [name]{escape(record.friendly_name)}[/]"
        )
        self.console.print(
            f"    [tree]{tree}[/] [label]Device:[/] [value]{escape(record.device_path)}[/]"
        )
        self.console.print(
            f"    [tree]{tree}[/] [label]Size:[/] [value]{escape(record.size)}[/]"
        )
        self.console.print(f"    [tree]{tree}[/] [label]Type:[/] [value]{conn_type}[/]")
        self.console.print(
            f"    [tree]{last}[/] [label]Status:[/] "
            f"[{status_style}]{mount_status(record, self.icons, self.mount_list_limit)}[/]"
        )
        if 0 < record.mount_count <= self.mount_list_limit:
            for mount in record.mount_points:
                self.console.print(
                    f"       [tree]{self.icons.arrow}[/] {escape(mount)}"
                )
        self.console.print()

    def show_drives(self, catalog: List[DriveRecord]) -> None:
        self.console.print("[section]Available Drives:[/]")
        self.rule()
        self.console.print()
        for index, record in enumerate(catalog, start=1):
            self.show_drive(index, record)
        self.rule()

    def show_menu(self, drive_count: int) -> None:
        self.console.print("\n[menu]Options:[/]")
        self.console.print(f"  [key]\\[1-{drive_count}][/] Select a drive to eject")
        self.console.print("  [key]\\[r][/] Refresh drive list")
        self.console.print("  [key]\\[q][/] Quit\n")

    # ------------------------------------------------------------
    # Input and short messages
    # ------------------------------------------------------------
    def ask_choice(self) -> str:
        """Read one menu choice. Raises EOFError when input is exhausted."""
        return self._input("[prompt]Your choice: [/]")

    def pause(self, message: str = "Press Enter to continue...") -> None:
        try:
            self._input(message)
        except EOFError:
            self.console.print()

    def show_invalid_selection(self) -> None:
        self.console.print(f"\n[error]{self.icons.error} Invalid selection.[/]")

    def show_goodbye(self) -> None:
        self.console.print("\n[info]Goodbye![/]")

    def warn(self, message: str) -> None:
        self.console.print(f"[warning]{self.icons.warning} {escape(message)}[/]")

    def error(self, message: str) -> None:
        self.console.print(f"[error]{self.icons.error} {escape(message)}[/]")

    # ------------------------------------------------------------
    # Eject progress (EjectReporter)
    # ------------------------------------------------------------
    def show_eject_start(self, device: str) -> None:
        self.console.print(
            f"[selected]{self.icons.warning} Selected: {escape(device)}[/]\n"
        )
        self.console.print(
            f"[info]{self.icons.drive} Unmounting all partitions...[/]\n"
        )

    def on_unmounting(self, partition: str, mount_point: str) -> None:
        self.console.print(
            f"  [tree]{self.icons.arrow}[/] [step]Unmounting {escape(partition)} "
            f"({escape(mount_point)})...[/]"
        )

    def on_unmount_result(self, partition: str, ok: bool) -> None:
        if ok:
            self.console.print(f"    [success]{self.icons.success} Success[/]")
        else:
            self.console.print(f"    [error]{self.icons.error} Failed[/]")

    def on_power_off(self, device: str) -> None:
        self.console.print(f"\n[info]{self.icons.eject} Powering off the drive...[/]\n")

    def show_eject_result(self, result: EjectResult) -> None:
        if result.state is EjectState.ABORTED_BEFORE_POWER_OFF:
            self.console.print(
                f"\n[error]{self.icons.error} Some partitions failed to unmount.[/]"
            )
            self.console.print(
                f"[warning]{self.icons.warning} The drive may still be in use.[/]\n"
            )
        elif result.state is EjectState.DONE:
            self.console.print(
                f"[success]{self.icons.success} Drive {escape(result.device)} "
                f"has been safely ejected![/]"
            )
            self.console.print(
                f"[success]{self.icons.success} You can now safely remove the drive.[/]\n"
            )
        else:
            self.console.print(
                f"[error]{self.icons.error} Failed to power off the drive.[/]\n"
            )
