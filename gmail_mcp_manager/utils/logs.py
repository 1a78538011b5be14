"""Logging setup shared by the server entry point and the CLI."""

from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: int | None = None) -> None:
    """Configure logging to stderr (STDIO-safe).

    Sends all logs to stderr so they don't interfere with MCP's
    STDIO transport which uses stdout for JSON-RPC messages.

    Respects LOG_LEVEL env var (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    unless an explicit level is given.
    """
    if level is None:
        log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
        level = logging.getLevelNamesMapping().get(log_level_str, logging.INFO)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )
    # Reduce noise from Google libraries
    logging.getLogger("googleapiclient").setLevel(logging.WARNING)
    logging.getLogger("google.auth").setLevel(logging.WARNING)


__all__ = ["configure_logging", "LOG_FORMAT"]
