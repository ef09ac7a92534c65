from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from moodlog.app.core import config
from moodlog.app.core.logging import JsonFormatter, configure_logging


@pytest.fixture(autouse=True)
def reset_settings_cache() -> None:
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()


def test_configure_logging_creates_handlers(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    log_file = tmp_path / "app.log"
    monkeypatch.setenv("LOG_FILE", str(log_file))
    monkeypatch.chdir(tmp_path)

    root_logger = logging.getLogger()
    original_handlers = list(root_logger.handlers)
    for handler in original_handlers:
        root_logger.removeHandler(handler)

    try:
        configure_logging()
        handlers = [h for h in root_logger.handlers if isinstance(h, RotatingFileHandler)]
        assert handlers
        assert Path(handlers[0].baseFilename) == log_file

        handler_count = len(root_logger.handlers)
        configure_logging()
        assert len(root_logger.handlers) == handler_count
    finally:
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()
        for handler in original_handlers:
            root_logger.addHandler(handler)


def test_configure_logging_console_only() -> None:
    root_logger = logging.getLogger()
    original_handlers = list(root_logger.handlers)
    original_level = root_logger.level
    for handler in original_handlers:
        root_logger.removeHandler(handler)

    try:
        configure_logging(logging.ERROR, to_file=False)

        assert root_logger.level == logging.ERROR
        assert len(root_logger.handlers) == 1
        assert not isinstance(root_logger.handlers[0], RotatingFileHandler)
    finally:
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
        for handler in original_handlers:
            root_logger.addHandler(handler)
        root_logger.setLevel(original_level)


def test_json_formatter_outputs_keys() -> None:
    formatter = JsonFormatter()
    record = logging.LogRecord(
        name="test",
        level=logging.WARNING,
        pathname=__file__,
        lineno=42,
        msg="fallback for %s",
        args=("Oslo",),
        exc_info=None,
    )
    record.city = "Oslo"
    record.reason = "timeout"
    record.extra_fields = {"entry_id": "abc"}

    payload = json.loads(formatter.format(record))

    assert payload["message"] == "fallback for Oslo"
    assert payload["level"] == "WARNING"
    assert payload["city"] == "Oslo"
    assert payload["reason"] == "timeout"
    assert payload["entry_id"] == "abc"
