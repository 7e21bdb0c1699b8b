# pyright: standard

"""backup-extend: backup_extend/__logger__.py
A common logger rendering colored status lines through rich.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

# Initialize basic console and handler
cons = Console()
rich_handler = RichHandler(console=cons, show_path=False)
# Create a logger directly
logger = logging.Logger("backup-extend", logging.INFO)

LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def create_logger(level="INFO", log_file=None) -> None:
    """Helper function to setup logging for a command run."""
    # pylint: disable=global-statement
    global cons, rich_handler

    cons = Console()
    rich_handler = RichHandler(console=cons, show_path=False, markup=False)

    handlers: list[logging.Handler] = [rich_handler]
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FILE_FORMAT))
        handlers.append(file_handler)

    logger.handlers.clear()
    logger.propagate = False
    logger.setLevel(level)
    for handler in handlers:
        logger.addHandler(handler)

    logging.basicConfig(
        format="%(message)s",
        datefmt="%H:%M:%S",
        level=level,
        handlers=handlers,
        force=True,
    )
