from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from .config import get_settings

REQUEST_FIELDS = ("request_id", "path", "method", "status", "duration_ms", "city", "reason")


class JsonFormatter(logging.Formatter):
    """Serialize log records as JSON for structured ingestion."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in REQUEST_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value

        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            payload.update(extra_fields)

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False)


def configure_logging(level: int = logging.INFO, *, to_file: bool = True) -> None:
    """Attach JSON handlers to the root logger once per process.

    The server logs to the rotating file and the console; the terminal client
    passes ``to_file=False`` and only gets the console handler.
    """

    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    formatter = JsonFormatter()
    root_logger.setLevel(level)

    if to_file:
        log_path: Path = get_settings().log_file
        handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)
