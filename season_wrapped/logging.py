"""Loguru setup for season wrapped.

Console records go to stderr, so ``--json`` output on stdout stays
machine-readable. A daily file sink keeps one JSON object per record.
Standard library logging (pandas, pydantic) is routed into the same sinks.

Example:
    >>> from season_wrapped.logging import setup_logging, get_logger
    >>> setup_logging()                      # LOG_LEVEL / LOG_DIR from settings
    >>> logger = get_logger(__name__, player_id="2468")
    >>> logger.info("Normalizing match {}", match_id)

Outcome lines are prefixed with a status tag:
    >>> logger.info(f"{SUCCESS} Wrapped for player 2468: 31 games")
    >>> logger.warning(f"{WARN} Match 98765: no away score at position 3")
    >>> logger.error(f"{FAIL} Player 2468: no team-seasons for Winter 2025")
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

from loguru import logger

SUCCESS = "\033[92m[SUCCESS]\033[0m"
FAIL = "\033[91m[FAIL]\033[0m"
WARN = "\033[93m[WARN]\033[0m"

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> | "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]} | {message}"
LOG_FILE_PATTERN = "season_wrapped_{time:YYYY-MM-DD}.log"

# Records logged without get_logger (stdlib intercept, bare loguru) still render
logger.configure(extra={"name": "season_wrapped"})


class InterceptHandler(logging.Handler):
    """Forward stdlib logging records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.bind(name=record.name).opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(
    level: str | None = None,
    log_dir: str | Path | None = None,
    rotation: str = "1 day",
    retention: str = "30 days",
    serialize: bool = True,
    console: bool = True,
) -> Path:
    """Install the console and file sinks.

    Args:
        level: Minimum level; LOG_LEVEL from settings when omitted.
        log_dir: Directory for log files; LOG_DIR from settings when omitted.
        rotation: When to start a new log file, e.g. "1 day" or "50 MB".
        retention: How long old log files are kept.
        serialize: Write file records as JSON.
        console: Also log to stderr.

    Returns:
        The log directory in use.
    """
    if level is None or log_dir is None:
        from season_wrapped.config import get_settings

        settings = get_settings()
        level = level or settings.log_level
        log_dir = log_dir if log_dir is not None else settings.log_dir_obj

    logger.remove()
    if console:
        logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_path / LOG_FILE_PATTERN,
        level=level,
        format=FILE_FORMAT,
        rotation=rotation,
        retention=retention,
        serialize=serialize,
        enqueue=True,
    )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logger.bind(name=__name__).debug("Logging to {} at {}", log_path, level)
    return log_path


def get_logger(name: str, **context: Any) -> Any:
    """Logger bound to a module name plus optional context fields.

    Context (e.g. ``player_id``) lands in each record's ``extra`` and in the
    JSON file sink.
    """
    return logger.bind(name=name, **context)


__all__ = ["get_logger", "logger", "setup_logging", "SUCCESS", "FAIL", "WARN"]
