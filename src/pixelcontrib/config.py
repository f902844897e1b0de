"""
Configuration & Constants
=========================
Central registry for the PCMP format constants and numerical tolerances.

Exports:
    PCMP_MAGIC (bytes): File identifier, ASCII "PCMP".
    PCMP_MAGIC_WORD (int): The magic read as one little-endian u32.
    PCMP_VERSION (int): The only supported format version.
    DEFAULT_LOG_LEVEL (int): Level used by ``setup_logging`` when none is given.
"""
import logging
import os

# PCMP binary layout
PCMP_MAGIC: bytes = b"PCMP"
PCMP_MAGIC_WORD: int = 0x504D4350
PCMP_VERSION: int = 1

# struct formats, all little endian
HEADER_FORMAT: str = "<4sII"  # magic, version, map count
MAP_HEADER_FORMAT: str = "<If"  # map size, camera angle
VALUE_DTYPE: str = "<f4"

# Numerical tolerances
ROUND_TRIP_TOLERANCE: float = 1e-6
L1_NORM_EPSILON: float = 1e-5

SUPPORTED_MAP_SIZES: tuple[int, ...] = (16, 32, 64, 128, 256, 512, 1024)

# Number of samples per latitude ring of the sphere grid sampler, pole to pole
SPHERE_GRID_ROWS: tuple[int, ...] = (1, 6, 8, 6, 1)


def get_log_level(default: str = "INFO") -> int:
    """
    Resolve the log level from the PIXELCONTRIB_LOG_LEVEL environment variable.
    """
    name = os.environ.get("PIXELCONTRIB_LOG_LEVEL", default).upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        return logging.INFO
    return level


DEFAULT_LOG_LEVEL: int = get_log_level()
