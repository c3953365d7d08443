"""Logging setup for the command line."""
from __future__ import annotations

import json
import logging
import sys

PACKAGE_LOGGER = "buzzgauge"


def configure_logging(level: str = "WARNING", json_format: bool = False) -> logging.Logger:
    """Send buzzgauge records to stderr, replacing handlers from any earlier call."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    for old in list(logger.handlers):
        logger.removeHandler(old)

    handler = logging.StreamHandler(sys.stderr)
    if json_format:
        handler.setFormatter(_JsonLineFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    # Output is owned by the CLI; keep records off the root logger.
    logger.propagate = False
    return logger


class _JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload)
