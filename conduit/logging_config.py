"""
Logging configuration for Conduit.

All modules log through children of the ``conduit`` logger.
"""

import logging
import sys


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Set up console logging for Conduit.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        The configured ``conduit`` logger
    """
    logger = logging.getLogger("conduit")
    logger.setLevel(getattr(logging, level.upper()))

    # Clear existing handlers so repeated startups don't duplicate output
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(
        fmt='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    logger.addHandler(handler)

    # Don't propagate to root logger
    logger.propagate = False

    return logger
