"""
Logging setup for SonicSlice.

One shared "SonicSlice" logger writes to stdout. The level can be raised with
the SONICSLICE_LOG_LEVEL environment variable (DEBUG by default).
"""
import logging
import os
import sys

LOGGER_NAME = "SonicSlice"


def setup_logger(level: str | None = None) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    level_name = (level or os.environ.get("SONICSLICE_LOG_LEVEL", "DEBUG")).upper()
    logger.setLevel(getattr(logging, level_name, logging.DEBUG))

    # Console Handler
    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(logging.DEBUG)

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    ch.setFormatter(formatter)

    if not logger.handlers:
        logger.addHandler(ch)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Child logger under the shared SonicSlice logger (e.g. "SonicSlice.cli")."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


logger = setup_logger()
