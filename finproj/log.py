"""
Logging configuration using loguru.

Engine modules log through ``from loguru import logger`` directly. Call
setup_logging() once at application startup (the CLI does this from
AppSettings) to choose the level and an optional rotating log file.
"""

import sys
from typing import Optional

from loguru import logger


def setup_logging(
    level: str = "WARNING",
    log_file: Optional[str] = None,
    fmt: str = "<level>[{level.name}]</level> {message}",
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """
    Configure loguru with console and optional file output.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR).
        log_file: Path to log file. If None, only logs to stderr.
        fmt: Loguru format string for the console sink.
        rotation: Log file rotation size.
        retention: How long to keep rotated logs.
    """
    logger.remove()
    logger.add(sys.stderr, level=level, format=fmt)

    if log_file:
        logger.add(
            log_file,
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function} | {message}",
            rotation=rotation,
            retention=retention,
        )
