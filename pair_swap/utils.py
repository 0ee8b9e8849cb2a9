"""
Common utilities for the pair swap core.
"""

import logging
from typing import Optional, Union


def get_logger(name: str, level: Union[str, int] = logging.INFO) -> logging.Logger:
    """
    Get a logger with consistent formatting.

    Args:
        name: Logger name (typically __name__)
        level: Logging level

    Returns:
        Configured logger with a single stream handler
    """
    logger = logging.getLogger(name)

    if logger.level == logging.NOTSET:
        logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
            datefmt="%H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def short_address(address: Optional[str]) -> str:
    """Shorten an address for log lines (0x1234...abcd)."""
    if not address:
        return "-"
    if len(address) <= 12:
        return address
    return f"{address[:6]}...{address[-4:]}"
