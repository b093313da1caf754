# parkki/utils/logger.py
"""
Process-wide logging setup, done once on the first get_logger() call.
Records go to stderr and, when LOG_DIR is writable, to LOG_DIR/LOG_FILE.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from parkki.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

_configured = False


def _file_handler(log_dir: str, filename: str) -> Optional[logging.Handler]:
    """Size-rotated log file (5 MB x 10), or None when the directory is not writable."""
    try:
        os.makedirs(log_dir, exist_ok=True)
        return RotatingFileHandler(
            os.path.join(log_dir, filename),
            maxBytes=5 * 1024 * 1024,
            backupCount=10,
            encoding="utf-8",
        )
    except OSError as e:
        logging.getLogger(__name__).warning(f"File logging disabled, cannot write to {log_dir}: {e}")
        return None


def configure_logging(level: Optional[str] = None, log_dir: Optional[str] = None) -> None:
    """Attach handlers to the root logger. Later calls are no-ops."""
    global _configured
    if _configured:
        return
    _configured = True

    level = (level or settings.LOG_LEVEL).upper()
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    root = logging.getLogger()
    root.setLevel(level)

    handlers = [logging.StreamHandler(), _file_handler(log_dir or settings.LOG_DIR, settings.LOG_FILE)]
    for handler in filter(None, handlers):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Named logger for a module: `logger = get_logger(__name__)`."""
    configure_logging()
    return logging.getLogger(name)
