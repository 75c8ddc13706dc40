"""Logging setup for the command line.

Library modules only create module loggers; handlers are installed here,
once, by the CLI.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(name)s: %(message)s"


def configure_logging(debug: bool = False, quiet: bool = False) -> None:
    """Send log records to stderr through Rich.

    Args:
        debug: Log at DEBUG instead of INFO.
        quiet: Log warnings and errors only (ignored when debug is set).
    """
    if debug:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=debug,
        rich_tracebacks=debug,
    )
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )


__all__ = ["configure_logging"]
