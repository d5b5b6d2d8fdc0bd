"""
Logging setup for the app process.
"""

from __future__ import annotations

import logging

from rich.logging import RichHandler

_CONFIGURED_LEVEL: int | None = None


def setup_logging(level: str | int = logging.INFO) -> None:
    """
    Configure the root logger with a Rich console handler.

    Streamlit reruns the app script on every interaction, so this is a no-op
    when the requested level is already installed.

    Args:
        level: Logging level name ("DEBUG", "INFO", ...) or number
    """
    global _CONFIGURED_LEVEL

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    if _CONFIGURED_LEVEL == level:
        return

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in list(root_logger.handlers):
        if isinstance(handler, RichHandler):
            root_logger.removeHandler(handler)

    console_handler = RichHandler(
        show_time=True,
        show_path=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root_logger.addHandler(console_handler)

    # Reduce verbosity of some libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("faker").setLevel(logging.WARNING)

    _CONFIGURED_LEVEL = level
