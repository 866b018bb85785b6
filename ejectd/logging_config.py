"""Logging setup: a rotating log file, plus Rich console output when debugging."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_BYTES = 2 * 1024 * 1024
BACKUP_COUNT = 3


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
    console: Optional[Console] = None,
) -> logging.Logger:
    """
    Configure the ``ejectd`` logger.

    The log file only ever receives diagnostics; the operator-facing output is the
    styled console stream. At DEBUG level a RichHandler on stderr is attached as well.

    Args:
        log_level: Minimum level to record (e.g. "INFO", "DEBUG").
        log_file: Rotating log file path; ``None`` disables file logging.
        console: Console used to report a log file that cannot be opened.

    Returns:
        The configured package logger.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    logger = logging.getLogger("ejectd")
    logger.setLevel(level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            fh = RotatingFileHandler(
                log_file,
                maxBytes=MAX_LOG_BYTES,
                backupCount=BACKUP_COUNT,
                encoding="utf-8",
            )
            fh.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
            logger.addHandler(fh)
        except OSError as e:
            if console is not None:
                console.print(f"[bold #EBCB8B]⚠ Could not set up log file: {e}[/]")
                console.print("[#81A1C1]Continuing without a log file[/]")

    if level <= logging.DEBUG:
        logger.addHandler(
            RichHandler(console=Console(stderr=True), rich_tracebacks=True)
        )

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger
