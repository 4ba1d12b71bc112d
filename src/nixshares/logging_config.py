"""Logging setup shared by the CLI and the API server.

Environment Variables:
    NIXSHARES_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
"""
import logging
from typing import Optional

from nixshares.config.settings import config

LOG_FORMAT = "%(asctime)s | %(name)-28s | %(levelname)-7s | %(message)s"


def get_log_level(level: Optional[str] = None) -> int:
    level_str = (level or config.log_level).upper()
    return getattr(logging, level_str, logging.INFO)


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the ``nixshares`` logger once; later calls only adjust the level."""
    logger = logging.getLogger("nixshares")
    logger.setLevel(get_log_level(level))

    if logger.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
