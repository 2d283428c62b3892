"""Structured logging configuration."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }
        if record.__dict__.get("event"):
            payload["event"] = record.__dict__["event"]
        if record.__dict__.get("context"):
            payload["context"] = record.__dict__["context"]
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: str | int = "INFO", logfile: Path | None = None) -> None:
    """Log JSON lines to stderr, and to ``logfile`` when given."""

    formatter = JsonFormatter()
    logger = logging.getLogger()
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    logger.handlers.clear()

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if logfile is not None:
        logfile.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(logfile, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
