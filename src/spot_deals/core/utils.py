import logging
import sys
from typing import Optional

# Names of every logger configured through setup_logger
_configured_loggers: set[str] = set()


def setup_logger(
    name: str = "spot_deals",
    log_level: int = logging.DEBUG,
    log_format: Optional[str] = None
) -> logging.Logger:
    """
    Configure logging to stderr with the specified format and level.

    Args:
        name: Logger name (default: "spot_deals")
        log_level: Logging level (default: logging.DEBUG)
        log_format: Custom log format string (optional)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)

    if log_format is None:
        log_format = '[%(asctime)s] %(levelname)s [%(name)s.%(funcName)s:%(lineno)d] %(message)s'
    formatter = logging.Formatter(log_format, datefmt='%Y-%m-%d %H:%M:%S')
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)
    _configured_loggers.add(name)

    return logger


def set_log_level(log_level: int) -> None:
    """Apply ``log_level`` to every logger created by setup_logger and its handlers"""
    for name in _configured_loggers:
        logger = logging.getLogger(name)
        logger.setLevel(log_level)
        for handler in logger.handlers:
            handler.setLevel(log_level)
