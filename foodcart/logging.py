"""
Logging setup for foodcart.

Every module logs through ``get_logger(__name__)``. Values typed by the
client (item ids, session ids, promo codes) pass through a sanitizer
before they reach a log line.
"""

import logging
import os
import sys
from functools import cache

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _configure_root_logger() -> None:
    root = logging.getLogger()
    if root.handlers:
        return

    level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)
    root.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    # Upstash client talks REST over httpx; its request lines are noise here
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


_configure_root_logger()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _single_line(value: str) -> str:
    # CWE-117: a client value must not start a forged log line
    return value.replace("\r", "\\r").replace("\n", "\\n").replace("\x00", "")


def sanitize_id_for_logging(id_value: str | None, max_length: int = 8) -> str:
    """
    Item or session id, escaped and cut to ``max_length`` characters.

    Returns "N/A" for empty values.
    """
    if not id_value:
        return "N/A"
    return _single_line(str(id_value))[:max_length]


def mask_code_for_logging(code: str | None) -> str:
    """
    Promo code with everything past the first two characters hidden.

    >>> mask_code_for_logging("promo4377")
    'pr******* (9 chars)'
    """
    if not code:
        return "N/A"
    code = _single_line(str(code))
    return f"{code[:2]}{'*' * max(len(code) - 2, 0)} ({len(code)} chars)"


__all__ = [
    "get_logger",
    "mask_code_for_logging",
    "sanitize_id_for_logging",
]
