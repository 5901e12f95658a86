"""Logging setup for the MCP server.

Console output goes to stderr: in stdio mode stdout carries the protocol.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path

LOG_DIR = Path(os.getenv("LOG_DIR", str(Path.cwd() / "logs")))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Prevent duplicate handlers
_configured_loggers: set[str] = set()


def setup_logger(name: str = "figma_mcp", filename: str | None = "figma_mcp.log") -> logging.Logger:
    """Setup a logger with file and console handlers.

    Args:
        name: Logger name; module loggers are its children (e.g. 'figma_mcp.api')
        filename: Log file name inside LOG_DIR, or None for console only

    Returns:
        Configured logger instance
    """
    if name in _configured_loggers:
        return logging.getLogger(name)

    logger = logging.getLogger(name)
    logger.setLevel(LOG_LEVEL)
    logger.propagate = False  # Prevent duplicate logs

    if filename:
        try:
            LOG_DIR.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(LOG_DIR / filename, encoding="utf-8")
        except OSError as e:
            logger.warning(f"File logging disabled, cannot write to {LOG_DIR}: {e}")
        else:
            fh.setFormatter(logging.Formatter(
                "%(asctime)s [%(name)s] [%(levelname)s] %(message)s"
            ))
            logger.addHandler(fh)

    # Console handler (stderr)
    sh = logging.StreamHandler()
    sh.setFormatter(logging.Formatter(
        "%(asctime)s [%(name)s] %(message)s"
    ))
    logger.addHandler(sh)

    _configured_loggers.add(name)
    return logger
