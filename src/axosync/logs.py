"""Logging setup for axosync."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "axosync"


def configure_logging(level: str = "info", console: Console | None = None) -> logging.Logger:
    """Route axosync and uvicorn logs through a rich handler at ``level``."""
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    numeric_level = logging.getLevelName(level.upper())

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers[:] = [handler]
    logger.setLevel(numeric_level)
    logger.propagate = False

    for name in ("uvicorn", "uvicorn.error"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers[:] = [handler]
        uvicorn_logger.setLevel(numeric_level)
        uvicorn_logger.propagate = False

    return logger
