"""Nord-flavoured style tokens and icons for the terminal UI."""

from dataclasses import dataclass, field
from typing import Dict, Tuple

from rich.theme import Theme


class NordColors:
    POLAR_NIGHT_4: str = "#4C566A"
    SNOW_STORM_1: str = "#D8DEE9"
    SNOW_STORM_3: str = "#ECEFF4"
    FROST_1: str = "#8FBCBB"
    FROST_2: str = "#88C0D0"
    FROST_3: str = "#81A1C1"
    RED: str = "#BF616A"
    YELLOW: str = "#EBCB8B"
    GREEN: str = "#A3BE8C"
    PURPLE: str = "#B48EAD"


@dataclass(frozen=True)
class Icons:
    drive: str = "💾"
    usb: str = "🔌"
    sata: str = "💿"
    nvme: str = "⚡"
    mounted: str = "📌"
    unmounted: str = "⭕"
    success: str = "✅"
    error: str = "❌"
    warning: str = "⚠️"
    eject: str = "⏏️"
    arrow: str = "→"
    branch: str = "├─"
    last_branch: str = "└─"

    def connection(self, connection_type: str) -> str:
        """Icon for a bus label as produced by ``catalog.connection_type``."""
        if connection_type == "SATA":
            return self.sata
        if connection_type == "NVMe":
            return self.nvme
        return self.usb


def _default_styles() -> Dict[str, str]:
    return {
        "title": f"bold {NordColors.PURPLE}",
        "subtitle": NordColors.POLAR_NIGHT_4,
        "section": f"bold {NordColors.GREEN}",
        "rule": NordColors.POLAR_NIGHT_4,
        "index": f"bold {NordColors.YELLOW}",
        "name": f"bold {NordColors.SNOW_STORM_3}",
        "label": NordColors.FROST_2,
        "value": NordColors.SNOW_STORM_1,
        "tree": NordColors.POLAR_NIGHT_4,
        "mounted": NordColors.GREEN,
        "unmounted": NordColors.POLAR_NIGHT_4,
        "menu": f"bold {NordColors.FROST_2}",
        "key": NordColors.YELLOW,
        "prompt": f"bold {NordColors.GREEN}",
        "info": NordColors.FROST_2,
        "step": NordColors.FROST_3,
        "success": NordColors.GREEN,
        "warning": f"bold {NordColors.YELLOW}",
        "error": f"bold {NordColors.RED}",
        "selected": f"bold {NordColors.YELLOW}",
        "border": NordColors.FROST_1,
    }


@dataclass(frozen=True)
class UITheme:
    """
    Everything the presentation layer needs to style its output.

    Handed to :class:`ejectd.display.Display` explicitly; nothing here is global.
    """

    styles: Dict[str, str] = field(default_factory=_default_styles)
    icons: Icons = field(default_factory=Icons)
    rule_width: int = 60
    title: str = "Ejectd"
    subtitle: str = "Safe removal tool for external drives"
    figlet_fonts: Tuple[str, ...] = ("slant", "small", "mini")

    def rich_theme(self) -> Theme:
        return Theme(self.styles)


DEFAULT_THEME = UITheme()
