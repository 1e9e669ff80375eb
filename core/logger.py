"""Logging helpers for the application.

Provides a convenience `get_logger` factory that configures a stream and
rotating file handler for consistent logging across modules. The log
directory and default level can be moved with `NUTRITRACK_LOG_DIR` and
`NUTRITRACK_LOG_LEVEL`.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

LOG_DIR = os.getenv(
    "NUTRITRACK_LOG_DIR",
    os.path.join(os.path.dirname(__file__), "..", "logs"),
)
os.makedirs(LOG_DIR, exist_ok=True)

LOG_FILE = os.path.join(LOG_DIR, "nutritrack.log")
LOG_LEVEL = logging.getLevelName(os.getenv("NUTRITRACK_LOG_LEVEL", "INFO").upper())
if not isinstance(LOG_LEVEL, int):
    LOG_LEVEL = logging.INFO

_formatter = logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")

_stream_handler = logging.StreamHandler()
_stream_handler.setFormatter(_formatter)

_file_handler = RotatingFileHandler(LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=3)
_file_handler.setFormatter(_formatter)


def get_logger(name: str = __name__, level: int = LOG_LEVEL) -> logging.Logger:
    """Return a logger wired to the shared stream and rotating file handlers.

    Handlers are attached once per logger name, so calling this at import
    time in every module is safe.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel(level)
        logger.addHandler(_stream_handler)
        logger.addHandler(_file_handler)
        logger.propagate = False
    return logger
