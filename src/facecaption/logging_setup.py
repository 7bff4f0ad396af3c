"""
Logging configuration shared by the scripts.

Modules only ever call `logging.getLogger(__name__)`; the entry point calls
`setup_logging()` once.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[str] = None, format: str = DEFAULT_FORMAT) -> logging.Logger:
    """
    Configure the root logger and return the package logger.

    Args:
        level: Log level name. Defaults to the LOG_LEVEL env var, then INFO.
        format: Log format string.
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")

    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(level=log_level, format=format, stream=sys.stdout)

    logger = logging.getLogger("facecaption")
    logger.setLevel(log_level)
    return logger
