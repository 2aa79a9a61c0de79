# === FILE: seo_scout/logger.py ===
"""Logging setup for **SEO Scout**.

Every module logs through the shared ``SeoScout`` logger::

    from seo_scout.logger import logger
    logger.info("Analyzing %d/%d: %s", index, total, url)

Records go to *stderr* so that reports printed on stdout (JSON, CSV, HTML)
stay pipeable; ``--log-file`` adds a size-rotated copy on disk.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, List, Union

LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "SeoScout"
LOG_FILE_MAX_BYTES: Final[int] = 5 * 1024 * 1024
LOG_FILE_BACKUPS: Final[int] = 3

logger: logging.Logger = logging.getLogger(LOGGER_NAME)


def _handlers(log_file: Union[str, Path, None]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(
                filename=str(log_file),
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        )
    return handlers


def init_logging(
    level: Union[int, str] = "WARNING",
    log_file: Union[str, Path, None] = None,
    log_format: str = LOG_FORMAT,
) -> logging.Logger:
    """Replace the handlers of :data:`logger`; called once by the CLI group.

    ``log_file`` of None keeps output on stderr only. The logger stops
    propagating so records are not printed twice by a root handler.
    """
    formatter = logging.Formatter(log_format)
    logger.setLevel(level)
    logger.handlers.clear()
    for handler in _handlers(log_file):
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.propagate = False
    return logger


__all__ = ["LOGGER_NAME", "init_logging", "logger"]
