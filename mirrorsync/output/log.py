# MirrorSync Logging Setup
# Routes library log records to the Rich console and an optional log file

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console as RichConsole
from rich.logging import RichHandler

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(
    *,
    verbose: bool = False,
    log_file: Optional[str] = None,
    console: Optional[RichConsole] = None,
) -> logging.Logger:
    """
    Configure the mirrorsync logger.

    Args:
        verbose: Show debug records on the console instead of warnings only.
        log_file: Optional file receiving all records at debug level.
        console: Rich console to log to (stderr if not provided).

    Returns:
        The configured "mirrorsync" logger.
    """
    logger = logging.getLogger("mirrorsync")
    logger.setLevel(logging.DEBUG)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    rich_handler = RichHandler(
        console=console or RichConsole(stderr=True),
        show_path=False,
        markup=False,
    )
    rich_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.addHandler(rich_handler)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger
