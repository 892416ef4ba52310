"""Logging setup for the console.

Every module logs through ``logging.getLogger(__name__)``; this module only
decides where those records go.  One handler is attached to the
``sentiment_console`` package logger and writes to stderr, so diagnostics
never interleave with the rendered results on stdout.

Formats
-------
``simple``    ``WARNING: message``
``detailed``  timestamp, level, logger name, message
``json``      one JSON object per line (for piping into log collectors)
"""

from __future__ import annotations

import json
import logging
import sys
from typing import TextIO

from sentiment_console.config import LoggingSettings

PACKAGE_LOGGER = "sentiment_console"

_SIMPLE_FORMAT = "%(levelname)s: %(message)s"
_DETAILED_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """Render a log record as a single-line JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _build_formatter(fmt: str) -> logging.Formatter:
    if fmt == "json":
        return JsonFormatter()
    if fmt == "detailed":
        return logging.Formatter(_DETAILED_FORMAT)
    return logging.Formatter(_SIMPLE_FORMAT)


def configure_logging(settings: LoggingSettings, *, stream: TextIO | None = None) -> logging.Logger:
    """Attach a single stderr handler to the package logger.

    Calling this twice replaces the previous handler rather than stacking a
    second one, so the CLI and tests can both call it freely.

    Args:
        settings: Level and format from the loaded configuration.  An
                  unknown level name falls back to ``WARNING``.
        stream:   Destination stream; defaults to ``sys.stderr``.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    level = logging.getLevelName(settings.level.upper())
    if not isinstance(level, int):
        level = logging.WARNING

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(_build_formatter(settings.format))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
