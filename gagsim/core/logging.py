"""
Logging setup of the gag simulator.

The console front end installs a rich handler once; library code only asks
for named loggers and never configures handlers itself.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

# Emits per-solve statistics at debug level.
SEARCH_LOGGER = "gagsim.solver.search"


def setup_logging(level: int = logging.INFO, search_stats: bool = False) -> None:
    """
    Routes every log record to a rich handler.

    Args:
        level (int): The root logging level.
        search_stats (bool): Also show the debug statistics of the combination
            search, whatever ``level`` is.

    """
    handler = RichHandler(
        console=Console(width=120, force_terminal=True, force_jupyter=False),
        show_time=True,
        show_level=True,
        show_path=False,
        markup=True,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s - %(message)s", datefmt="[%X]"))
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler])
    if search_stats:
        logging.getLogger(SEARCH_LOGGER).setLevel(logging.DEBUG)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
