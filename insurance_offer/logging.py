"""
Logging helpers for the offer widget.

Importing this module has no side effects. An embedding app that wants the
widget's default console output calls ``configure_logging()`` once at
startup; apps with their own logging setup skip it.

    from insurance_offer.logging import configure_logging, get_logger

    configure_logging()
    logger = get_logger(__name__)
"""

import logging
import os
import sys
from functools import cache

CONSOLE_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
COMPACT_FORMAT = "%(levelname)s [%(name)s] %(message)s"

QUIET_LIBRARIES = ("httpx", "httpcore")


def resolve_level(level: str | int | None = None) -> int:
    """Numeric level from an explicit value, else ``LOG_LEVEL``, else INFO."""
    if isinstance(level, int):
        return level
    name = (level or os.environ.get("LOG_LEVEL") or "INFO").upper()
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.INFO


def configure_logging(level: str | int | None = None) -> bool:
    """
    Attach a stdout handler to the root logger.

    Does nothing when the root logger already has handlers, so a host app's
    configuration always wins and repeat calls are harmless. ``OFFER_ENV=production``
    selects the compact format without timestamps.

    Returns:
        True if a handler was installed
    """
    root = logging.getLogger()
    if root.handlers:
        return False

    numeric_level = resolve_level(level)
    compact = os.environ.get("OFFER_ENV") == "production"

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(COMPACT_FORMAT if compact else CONSOLE_FORMAT))
    root.addHandler(handler)
    root.setLevel(numeric_level)

    for name in QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)
    return True


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


_CONTROL_ESCAPES = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": None})


def _escape_control(value: str) -> str:
    # CWE-117: a newline in a host message must not start a fake log record
    return value.translate(_CONTROL_ESCAPES)


def sanitize_id_for_logging(id_value: str | None) -> str:
    """
    Short form of a storefront GID.

    ``gid://shopify/CartLine/123`` logs as ``123``; empty values log as "N/A".
    """
    if not id_value:
        return "N/A"
    return _escape_control(str(id_value)).rsplit("/", 1)[-1][:32]


def sanitize_string_for_logging(value: str | None, max_length: int = 120) -> str:
    """Escape control characters in host text and cut it to ``max_length``."""
    if not value:
        return "N/A"
    text = _escape_control(str(value))
    return text if len(text) <= max_length else f"{text[:max_length]}..."


__all__ = [
    "CONSOLE_FORMAT",
    "COMPACT_FORMAT",
    "configure_logging",
    "get_logger",
    "resolve_level",
    "sanitize_id_for_logging",
    "sanitize_string_for_logging",
]
