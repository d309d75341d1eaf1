"""Loguru sink setup for applications embedding publishers."""

import sys
from typing import Any, Optional

from loguru import logger

from .config import config


def configure_logging(level: Optional[str] = None, sink: Any = sys.stderr) -> int:
    """Replace loguru's default sink with one at the configured level.

    Returns:
        The loguru handler id of the new sink
    """
    logger.remove()
    return logger.add(sink, level=(level or config.LOG_LEVEL).upper())
