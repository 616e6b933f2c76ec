"""
Runtime configuration shared by the kernels and the scripts.
Values can be overridden through environment variables.
"""

import os
import logging

# Matrices with a dimension at or below this size are multiplied naively
SIMPLE_MULTIPLICATION_THRESHOLD = int(os.environ.get("STRASSEN_LAB_THRESHOLD", "2048"))

# Absolute tolerance used by Matrix.equals
EQUALITY_EPSILON = 1e-9

DEFAULT_LAYER_SIZES = (512, 512)
DEFAULT_BIAS_LIMITS = (0.0, 10.0)

LOG_LEVEL = os.environ.get("STRASSEN_LAB_LOG_LEVEL", "WARNING").upper()


def configure_logging(level=None):
    """
    Set up root logging for command-line entry points.

    Args:
        level: logging level name or number; defaults to LOG_LEVEL
    """
    if level is None:
        level = LOG_LEVEL
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("strassen_lab").setLevel(level)
    # numba is chatty at DEBUG while compiling
    logging.getLogger("numba").setLevel(logging.WARNING)
