"""Logging setup for the markdownd process."""

import logging
import os
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(message)s"
DATE_FORMAT = "%Y/%m/%d %H:%M:%S"
LOG_FILE_MODE = 0o660


def setup_logging(log_level: str = "INFO", log_file: Path | None = None) -> logging.Handler:
    """Configure the ``markdownd`` logger.

    Logs go to stderr, or are appended to ``log_file`` when given. A missing
    log file is created with mode 0660.

    Raises:
        OSError: If the log file cannot be opened for appending
    """
    if log_file is None:
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
    else:
        fd = os.open(log_file, os.O_WRONLY | os.O_CREAT | os.O_APPEND, LOG_FILE_MODE)
        os.close(fd)
        handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")

    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    logger = logging.getLogger("markdownd")
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()
    logger.addHandler(handler)
    logger.setLevel(log_level.upper())
    logger.propagate = False

    # aiohttp's own errors (e.g. malformed requests) go to the same sink
    aiohttp_logger = logging.getLogger("aiohttp.server")
    aiohttp_logger.handlers = [handler]
    aiohttp_logger.propagate = False

    return handler
