"""
Logging configuration for command line runs.

Usage:
    from pair_swap import logging_config
    logging_config.setup()
"""

import logging
import sys

PACKAGE_LOGGERS = ("pair_swap", "dex")


def setup(level=logging.INFO):
    """
    Configure logging for cleaner, more readable output.

    - Uses shorter timestamp format (HH:MM:SS instead of full datetime)
    - Quiets the HTTP/provider chatter from web3 and urllib3
    """
    root = logging.getLogger()
    root.setLevel(level)

    root.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-7s | %(message)s", datefmt="%H:%M:%S"
    )
    console.setFormatter(formatter)
    root.addHandler(console)

    # Suppress noisy loggers
    logging.getLogger("web3").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    # Module loggers from get_logger() carry their own handler and level;
    # route them through the root handler instead.
    for name, existing in list(logging.Logger.manager.loggerDict.items()):
        if name.split(".")[0] in PACKAGE_LOGGERS and isinstance(
            existing, logging.Logger
        ):
            existing.handlers.clear()
            existing.setLevel(logging.NOTSET)

    for name in PACKAGE_LOGGERS:
        logging.getLogger(name).setLevel(level)


def setup_debug():
    """
    Verbose logging for debugging.
    Shows quote parameters and provider requests.
    """
    setup(level=logging.DEBUG)
    logging.getLogger("web3").setLevel(logging.INFO)
