"""
Logging for cartstore.

    from cartstore.logging import get_logger
    logger = get_logger(__name__)

The package logger ("cartstore") gets a stdout handler on first import
unless the host app already configured the root logger. Level comes
from CARTSTORE_LOG_LEVEL, then LOG_LEVEL.
"""

import logging
import os
import sys
from functools import cache

PACKAGE_LOGGER = "cartstore"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _level_from_env() -> int:
    name = os.environ.get("CARTSTORE_LOG_LEVEL") or os.environ.get("LOG_LEVEL", "INFO")
    return getattr(logging, name.upper(), logging.INFO)


def _configure_package_logger() -> None:
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(_level_from_env())

    # Host app owns output once it has set up logging itself
    if logging.getLogger().handlers or package_logger.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)

    # Upstash REST calls go through httpx
    logging.getLogger("httpx").setLevel(logging.WARNING)


_configure_package_logger()


@cache
def get_logger(name: str) -> logging.Logger:
    """Logger for a cartstore module (pass __name__)."""
    return logging.getLogger(name)


def safe_text(value: object, max_length: int = 80) -> str:
    """
    Render catalog text (titles, raw blobs) for a single log line.

    Control characters are escaped so a product title cannot forge
    extra log records (CWE-117). Long values are cut.
    """
    if value is None or value == "":
        return "-"
    text = (
        str(value)
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace("\x00", "")
    )
    if len(text) > max_length:
        return text[:max_length] + "..."
    return text


__all__ = ["LOG_FORMAT", "PACKAGE_LOGGER", "get_logger", "safe_text"]
