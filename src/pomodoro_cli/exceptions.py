"""Exception hierarchy for Pomodoro CLI.

Timer errors are raised at the setter boundary before any engine state is
touched. Storage errors are raised only when the local store itself fails;
remote failures are reported through ``WriteResult`` instead.
"""

from __future__ import annotations


class PomodoroError(Exception):
    """Base class for all Pomodoro CLI errors."""


class TimerError(PomodoroError):
    """Raised when the timer engine rejects an operation."""


class InvalidDurationError(TimerError, ValueError):
    """Raised for negative or otherwise unusable durations."""


class InvalidTransitionError(TimerError):
    """Raised when an operation is not permitted in the current timer state."""


class StorageError(PomodoroError):
    """Base class for persistence failures."""


class SessionStoreError(StorageError):
    """Raised when the local session store cannot be read or written."""


class RemoteStorageError(StorageError):
    """Raised by remote adapters for network, auth or quota failures."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class SessionNotFoundError(PomodoroError):
    """Raised when a session id is not present in history."""

    def __init__(self, session_id: str):
        super().__init__(f"Session '{session_id}' not found")
        self.session_id = session_id


class AmbiguousSessionIdError(PomodoroError):
    """Raised when a session id prefix matches more than one session."""

    def __init__(self, prefix: str, matches: list[str]):
        super().__init__(
            f"Session id '{prefix}' is ambiguous: matches {', '.join(matches)}"
        )
        self.prefix = prefix
        self.matches = matches
