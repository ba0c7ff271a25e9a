"""Logging setup for the Form Builder server and its designer core"""

import logging
import sys
from typing import Optional

from form_builder.config import config

LOG_FORMAT = "%(levelname)s:%(name)s:%(message)s"

# Third-party loggers that drown out form and designer activity at INFO
QUIET_LOGGERS = ("multipart", "httpx", "sqlalchemy.engine")


class InfoFilter(logging.Filter):
    """Pass only records below WARNING, so stdout never repeats stderr"""

    def filter(self, record):
        return record.levelno < logging.WARNING


def _resolve_level(level: Optional[str]) -> int:
    name = (level or config.get("log_level") or "INFO").upper()
    return getattr(logging, name, logging.INFO)


def setup_logging(level: Optional[str] = None) -> None:
    """
    Route INFO/DEBUG to stdout and WARNING/ERROR to stderr.

    Args:
        level: Level name overriding ``config["log_level"]``

    Calling it again replaces the handlers instead of stacking them.
    """
    formatter = logging.Formatter(LOG_FORMAT)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(logging.DEBUG)
    stdout_handler.addFilter(InfoFilter())
    stdout_handler.setFormatter(formatter)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(_resolve_level(level))
    root_logger.handlers.clear()
    root_logger.addHandler(stdout_handler)
    root_logger.addHandler(stderr_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Module logger; pass ``__name__``"""
    return logging.getLogger(name)
