"""Logging setup for the scheduler process and the management CLI."""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sensable.config import Config

LOG_FILE_NAME = "sensable.log"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s | %(message)s"

# APScheduler reports failed and missed job runs on its own logger tree.
SCHEDULER_LOGGER_NAME = "apscheduler"


def parse_level(level_name: str) -> int:
    """Map a level name such as ``"debug"`` to its numeric value, INFO if unknown."""
    level = logging.getLevelName(level_name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logger(config: Config | None = None, name: str = "sensable") -> logging.Logger:
    """
    Configure the application logger from ``Config``.

    Records go to ``{log_dir}/sensable.log`` (rotated at ``log_max_bytes``,
    keeping ``log_backup_count`` files) and to stdout. APScheduler's own
    warnings are routed to the same handlers so job misfires and crashed
    runs end up in the application log.

    Calling it again replaces the handlers instead of stacking them.

    Args:
        config: Settings to read; ``get_config()`` if None
        name: Logger name

    Returns:
        Configured logger
    """
    if config is None:
        from sensable.config import get_config

        config = get_config()

    level = parse_level(config.log_level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    log_dir = Path(config.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    handlers: list[logging.Handler] = [
        RotatingFileHandler(
            log_dir / LOG_FILE_NAME,
            maxBytes=config.log_max_bytes,
            backupCount=config.log_backup_count,
            encoding="utf-8",
        ),
        logging.StreamHandler(sys.stdout),
    ]
    for handler in handlers:
        handler.setFormatter(formatter)

    logger = logging.getLogger(name)
    _attach(logger, handlers, level)
    _attach(logging.getLogger(SCHEDULER_LOGGER_NAME), handlers, max(level, logging.WARNING))
    return logger


def _attach(logger: logging.Logger, handlers: list[logging.Handler], level: int) -> None:
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    logger.setLevel(level)
    logger.propagate = False
    for handler in handlers:
        logger.addHandler(handler)
