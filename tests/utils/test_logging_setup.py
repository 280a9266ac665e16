"""Tests for logger setup."""

from __future__ import annotations

from logging.handlers import RotatingFileHandler

from pomodoro_cli.utils import logger as logger_module
from pomodoro_cli.utils.logger import get_logger, setup_logging


def test_child_loggers_share_app_root():
    assert get_logger().name == "pomodoro_cli"
    assert get_logger("pomodoro_cli.services.x").name == "pomodoro_cli.services.x"
    assert get_logger("thirdparty").name == "pomodoro_cli.thirdparty"


def test_setup_logging_writes_rotating_file(tmp_path, monkeypatch):
    log = get_logger()
    monkeypatch.setattr(logger_module, "_configured", False)
    monkeypatch.setattr(log, "handlers", [])
    monkeypatch.setattr(log, "propagate", True)
    monkeypatch.setattr(log, "level", log.level)

    setup_logging(log_dir=tmp_path)
    setup_logging(log_dir=tmp_path)
    try:
        assert len(log.handlers) == 1
        assert isinstance(log.handlers[0], RotatingFileHandler)

        get_logger("pomodoro_cli.focus").info("session started")
        log.handlers[0].flush()

        text = (tmp_path / "pomodoro.log").read_text()
        assert "INFO" in text
        assert "[pomodoro_cli.focus] session started" in text
    finally:
        for handler in log.handlers:
            handler.close()
