"""Logging setup shared by the pubsearch entry points."""

from __future__ import annotations

import logging
import sys


def configure_logging(log_level: int | str) -> logging.Logger:
    """Configure the root logger with a single stderr handler.

    stdout is left untouched so the stdio MCP transport stays clean.
    """
    resolved_level = (
        log_level
        if isinstance(log_level, int)
        else getattr(logging, str(log_level).upper(), logging.INFO)
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved_level)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    root_logger.addHandler(handler)
    return root_logger
