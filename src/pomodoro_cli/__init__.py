"""Pomodoro CLI - focus timer with local and cloud session history."""

__version__ = "0.1.0"
