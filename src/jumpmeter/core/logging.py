"""Logging configuration and utilities.

All loggers live under the ``jumpmeter`` namespace. Per-sample detector
diagnostics (rejected samples, phase transitions, discarded candidates) are
logged at DEBUG on ``jumpmeter.analysis.detector`` and can be switched on
separately with ``LOG_TRACE`` without raising the level of everything else.
"""

import logging
import sys
from pathlib import Path

from jumpmeter.core.config import LoggingSettings

NAMESPACE = "jumpmeter"
DETECTOR_LOGGER = f"{NAMESPACE}.analysis.detector"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    settings: LoggingSettings | None = None,
    level: str | None = None,
    trace: bool | None = None,
) -> logging.Logger:
    """Configure logging for the jumpmeter namespace.

    Args:
        settings: Logging settings (uses defaults if None)
        level: Override settings.level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        trace: Override settings.trace; True logs per-sample detector output

    Returns:
        The configured namespace logger
    """
    settings = settings or LoggingSettings()
    log_level = getattr(logging, (level or settings.level).upper(), logging.INFO)
    trace = settings.trace if trace is None else trace

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    logger = logging.getLogger(NAMESPACE)
    logger.setLevel(log_level)
    logger.handlers.clear()

    # Handlers pass everything; levels are decided per logger
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if settings.file:
        log_path = Path(settings.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logging.getLogger(DETECTOR_LOGGER).setLevel(logging.DEBUG if trace else logging.NOTSET)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger under the jumpmeter namespace
    """
    if not name.startswith(NAMESPACE):
        name = f"{NAMESPACE}.{name}"

    return logging.getLogger(name)
