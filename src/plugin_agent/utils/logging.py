"""Logging configuration for Plugin Agent."""

import logging
import sys
from typing import Literal

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def setup_logging(
    level: LogLevel = "INFO",
    format_string: str | None = None,
    stream: bool = True,
) -> None:
    """
    Set up logging for Plugin Agent.

    Args:
        level: Logging level.
        format_string: Custom format string. Uses default if None.
        stream: If True, log to stderr.
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logger = logging.getLogger("plugin_agent")
    logger.setLevel(getattr(logging, level))

    logger.handlers.clear()

    if stream:
        # stdout belongs to command output
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(format_string))
        logger.addHandler(handler)

