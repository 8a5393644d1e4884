"""Logging setup for the command line entry point."""

import logging
import sys
from typing import Optional, TextIO, Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(
    level: Union[int, str] = logging.INFO,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Install a single stream handler on the package logger.

    Calling this more than once replaces the previous handler instead of
    stacking a new one.

    Args:
        level: Logging level name or number.
        stream: Destination stream, stderr by default.

    Returns:
        The configured ``workout_streams`` logger.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level}")

    logger = logging.getLogger("workout_streams")
    for handler in list(logger.handlers):
        if getattr(handler, "_workout_streams", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._workout_streams = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
