"""Application-wide logger writing to platformdirs user_log_dir."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from platformdirs import user_log_dir

_APP_NAME = "pomodoro_cli"
_LOG_FILE = "pomodoro.log"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3

_configured = False


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the application logger, or a named child of it."""
    if not name or name == _APP_NAME:
        return logging.getLogger(_APP_NAME)
    if name.startswith(_APP_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_APP_NAME}.{name}")


def setup_logging(level: int = logging.DEBUG, log_dir: Path | None = None) -> logging.Logger:
    """Attach the rotating file handler once; later calls are no-ops."""
    global _configured
    logger = get_logger()
    if _configured:
        return logger

    log_dir = log_dir or Path(user_log_dir(_APP_NAME))
    log_dir.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        log_dir / _LOG_FILE,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )

    logger.setLevel(level)
    if not logger.handlers:
        logger.addHandler(handler)
    logger.propagate = False

    _configured = True
    return logger
