"""Data models for Pomodoro CLI."""

from .config_models import APIConfig, AppConfig, StorageConfig, UIConfig
from .session import (
    SessionRecord,
    SessionStats,
    SessionType,
    TimerState,
    new_session_id,
    sort_sessions,
)
from .settings import TimerSettings

__all__ = [
    "APIConfig",
    "AppConfig",
    "StorageConfig",
    "UIConfig",
    "SessionRecord",
    "SessionStats",
    "SessionType",
    "TimerState",
    "TimerSettings",
    "new_session_id",
    "sort_sessions",
]
