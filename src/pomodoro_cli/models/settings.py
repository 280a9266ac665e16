"""Timer settings model."""

from __future__ import annotations

from pydantic import BaseModel, Field

from .session import SessionType

DEFAULT_WORK_MINUTES = 25
DEFAULT_BREAK_MINUTES = 5


class TimerSettings(BaseModel):
    """User-adjustable timer configuration."""

    work_duration_minutes: int = Field(default=DEFAULT_WORK_MINUTES, ge=1)
    break_duration_minutes: int = Field(default=DEFAULT_BREAK_MINUTES, ge=1)
    enable_notifications: bool = True
    enable_vibration: bool = True
    enable_sound: bool = True

    def minutes_for(self, session_type: SessionType) -> int:
        """Configured length in minutes for a session type."""
        if session_type is SessionType.BREAK:
            return self.break_duration_minutes
        return self.work_duration_minutes

    def duration_for(self, session_type: SessionType) -> int:
        """Configured length in seconds for a session type."""
        return self.minutes_for(session_type) * 60
