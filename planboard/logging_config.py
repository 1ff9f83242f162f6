"""Logging setup driven by ``log_level`` / ``log_format`` in planboard.yaml."""

from __future__ import annotations

import json
import logging

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

_TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": self.formatTime(record),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: str = "info", fmt: str = "text") -> logging.Logger:
    """Attach a single stream handler to the ``planboard`` logger.

    Calling it again replaces the previous handler instead of stacking one.
    """
    logger = logging.getLogger("planboard")
    logger.setLevel(_LEVELS.get(level, logging.INFO))

    handler = logging.StreamHandler()
    handler.set_name("planboard")
    handler.setFormatter(JsonFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT))

    for existing in list(logger.handlers):
        if existing.get_name() == "planboard":
            logger.removeHandler(existing)
    logger.addHandler(handler)
    return logger
