"""
Logging Configuration for env_perm

The library itself only emits records under the ``env_perm`` logger;
handlers are attached by the CLI through setup_logging().
"""

import logging
import sys

ROOT_LOGGER_NAME = "env_perm"

# Module loggers
_loggers: dict[str, logging.Logger] = {}


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    Usage:
        from env_perm.logging import get_logger
        logger = get_logger(__name__)
        logger.debug("Scanning profile")
    """
    if name in _loggers:
        return _loggers[name]

    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        full_name = name
    else:
        full_name = f"{ROOT_LOGGER_NAME}.{name}"

    logger = logging.getLogger(full_name)
    _loggers[name] = logger
    return logger


def setup_logging(level: str = "WARNING", debug_mode: bool = False) -> None:
    """
    Send env_perm records to stderr.

    ``debug_mode`` forces DEBUG and adds the logger name and line number
    to each record.
    """
    if debug_mode:
        level = "DEBUG"
        fmt = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
    else:
        fmt = "%(asctime)s | %(levelname)-8s | %(message)s"

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt, datefmt="%H:%M:%S"))

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level.upper())
    root_logger.handlers = [handler]
