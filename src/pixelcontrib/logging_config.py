"""
Logging Configuration
Sets up the package logger. The library itself never calls this on import.
"""
import logging
import sys
from typing import Optional

from pixelcontrib.config import DEFAULT_LOG_LEVEL


def setup_logging(level: Optional[int] = None, log_file: Optional[str] = None) -> None:
    """
    Configures the logger for the 'pixelcontrib' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO). Falls back to
            the PIXELCONTRIB_LOG_LEVEL environment variable.
        log_file: Optional path to save logs to a file.
    """
    if level is None:
        level = DEFAULT_LOG_LEVEL

    logger = logging.getLogger("pixelcontrib")
    logger.setLevel(level)

    # Avoid duplicate handlers when called repeatedly
    if logger.hasHandlers():
        logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.info("Logging initialized.")
