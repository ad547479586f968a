"""
Logging configuration for Peer Discovery

Provides centralized logging setup for the discovery library.
"""

import logging
import sys


def setup_logging(level: str = "INFO", debug: bool = False) -> logging.Logger:
    """
    Setup logging configuration for Peer Discovery.

    Called once at process start (the CLI does this); library components
    receive their logger rather than configuring handlers themselves.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        debug: Enable debug output

    Returns:
        Configured logger instance
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    if debug:
        numeric_level = logging.DEBUG

    logging.basicConfig(
        level=numeric_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )

    logger = logging.getLogger('peer_discovery')
    logger.setLevel(numeric_level)

    return logger


def get_logger(name: str = 'peer_discovery') -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
