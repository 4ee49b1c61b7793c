"""
Logging configuration
"""

import logging
import sys
from typing import Optional
from core.config import Settings, settings as default_settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers kept at WARNING regardless of LOG_LEVEL
NOISY_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "aiosqlite",
    "httpx",
    "httpcore",
    "multipart",
)


def setup_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure the root logger once per process.

    Request lines come from RequestContextMiddleware, so uvicorn's own
    access log is only shown at DEBUG.
    """
    settings = settings or default_settings
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)]
    )
    logging.getLogger().setLevel(log_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if log_level > logging.DEBUG:
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        f"Logging configured at {settings.LOG_LEVEL} level ({settings.ENVIRONMENT})"
    )
