"""Debug logging setup for the CLI's --debug mode."""

import logging
import sys

PACKAGE_LOGGER = "opsgenie_client"
DEBUG_FORMAT = "[DEBUG] %(message)s"


def configure_debug_logging(stream=None) -> logging.Handler:
    """Route package DEBUG records to stderr with a `[DEBUG]` prefix.

    Idempotent: a second call reuses the handler installed by the first.

    Args:
        stream: Output stream (defaults to sys.stderr)

    Returns:
        The handler attached to the package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in logger.handlers:
        if getattr(handler, "_opsgenie_debug", False):
            return handler

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(DEBUG_FORMAT))
    handler._opsgenie_debug = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    return handler


def truncate(text: str, limit: int) -> str:
    """Cut `text` to `limit` characters, marking the cut with '...'."""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
