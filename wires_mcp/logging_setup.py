"""Logging configuration for the wr command line and the MCP server."""

from __future__ import annotations

import logging
import sys


def setup_logging(level: str | int = logging.WARNING) -> None:
    """
    Install a single stderr handler on the root logger.

    stdout carries JSON output for the command line and the stdio transport
    for the MCP server, so log records must never go there.

    Call this once, early, from an entry point.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    root = logging.getLogger()
    root.setLevel(level)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(fmt)
    root.addHandler(handler)

    logging.captureWarnings(True)
