# src/recowidget/telemetry.py
import json
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .config import LOG_LEVEL, TELEMETRY_LOG_PATH, TELEMETRY_LOGGER


class JsonLineFormatter(logging.Formatter):
    """Render log records as single-line JSON; dict messages become the payload."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any]
        if isinstance(record.msg, dict):
            payload = dict(record.msg)
        else:
            payload = {"message": record.getMessage()}

        payload.setdefault("level", record.levelname.lower())
        payload.setdefault("logger", record.name)
        payload.setdefault("ts", datetime.now(timezone.utc).isoformat())

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def _level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    # unknown names come back as "Level X" strings
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(
    level: Union[int, str] = LOG_LEVEL,
    log_path: Optional[str] = TELEMETRY_LOG_PATH,
) -> logging.Logger:
    """Configure the telemetry logger: stderr plus an optional rotating file."""
    logger = logging.getLogger(TELEMETRY_LOGGER)
    resolved = _level(level)

    logger.setLevel(resolved)
    logger.propagate = False
    logger.handlers.clear()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(resolved)
    stream_handler.setFormatter(JsonLineFormatter())
    logger.addHandler(stream_handler)

    if log_path:
        path = Path(log_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(path, maxBytes=5_000_000, backupCount=5, encoding="utf-8")
        file_handler.setLevel(resolved)
        file_handler.setFormatter(JsonLineFormatter())
        logger.addHandler(file_handler)

    return logger
