"""
Logging setup for the BFF.

The root logger is configured once, on first import, to write to stdout.
Modules then take their own named logger:

    from bff.logging import get_logger
    logger = get_logger(__name__)

Values that come from the mobile client (paths, cart keys, nonces) go
through the sanitize helpers before they are logged.
"""

import logging
import os
import sys
from functools import cache

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FORMAT_SIMPLE = "%(levelname)s - %(name)s - %(message)s"

# Libraries whose request chatter duplicates CommerceClient's own lines
QUIET_LOGGERS = ("httpx", "httpcore", "upstash_redis")

_ESCAPES = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": None})


def configure_logging(level: str | None = None) -> None:
    """Attach the stdout handler to the root logger unless one is present."""
    root = logging.getLogger()
    if root.handlers:
        return

    level_name = (level or os.environ.get("LOG_LEVEL") or "INFO").upper()
    root.setLevel(getattr(logging, level_name, logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    production = os.environ.get("ENVIRONMENT") == "production"
    handler.setFormatter(logging.Formatter(LOG_FORMAT_SIMPLE if production else LOG_FORMAT))
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


configure_logging()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def sanitize_id_for_logging(id_value: str | None) -> str:
    """
    Shorten an identifier (cart item key, nonce, order id) to 8 characters.

    Returns "N/A" for empty values.
    """
    if not id_value:
        return "N/A"
    return str(id_value).translate(_ESCAPES)[:8]


def sanitize_string_for_logging(value: str | None, max_length: int = 50) -> str:
    """Escape line breaks in a client-supplied string and cap its length."""
    if not value:
        return "N/A"
    safe_value = str(value).translate(_ESCAPES)
    if len(safe_value) > max_length:
        return safe_value[:max_length] + "..."
    return safe_value


__all__ = [
    "configure_logging",
    "get_logger",
    "sanitize_id_for_logging",
    "sanitize_string_for_logging",
]
