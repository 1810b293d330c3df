"""File logging for the storefront app.

Textual owns the terminal, so log records go to a debug file only.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from storefront.config import DEBUG_LOG_ENV, DEBUG_LOG_PATH

LOGGER_NAME = "storefront"


def resolve_log_path() -> Path:
    return Path(os.environ.get(DEBUG_LOG_ENV, "").strip() or DEBUG_LOG_PATH)


def setup_logging(level: int = logging.DEBUG, path: Path | None = None) -> logging.Logger:
    """Attach a file handler to the package logger. Safe to call more than once."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Avoid duplicate handlers when called again
    if logger.handlers:
        return logger

    log_path = path or resolve_log_path()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setFormatter(
        logging.Formatter(fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
    )
    logger.addHandler(handler)
    logger.propagate = False

    logger.info("logging_ready path=%s", log_path)
    return logger
