"""Pydantic-based settings management from environment variables."""

from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_LOG_FILE = Path("~/.local/state/ejectd/ejectd.log").expanduser()


class EjectdSettings(BaseSettings):
    """
    Runtime settings for ejectd.

    Values are read from ``EJECTD_*`` environment variables or a local ``.env``
    file, e.g. ``EJECTD_LOG_LEVEL=DEBUG``.
    """

    model_config = SettingsConfigDict(
        env_prefix="EJECTD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field("INFO", description="Logging level for the log file.")
    log_file: Path = Field(DEFAULT_LOG_FILE, description="Rotating log file location.")

    max_drives: int = Field(32, ge=1, description="Catalog capacity per refresh.")
    max_mount_points: int = Field(8, ge=1, description="Mount points kept per drive.")
    mount_list_limit: int = Field(
        3, ge=0, description="Mount points are listed individually up to this count."
    )
    invalid_choice_delay: float = Field(
        2.0, ge=0, description="Pause in seconds after an invalid menu choice."
    )

    lsblk_command: str = "lsblk"
    findmnt_command: str = "findmnt"
    udisksctl_command: str = "udisksctl"

    @property
    def required_tools(self) -> List[str]:
        return [self.lsblk_command, self.findmnt_command, self.udisksctl_command]


settings = EjectdSettings()
