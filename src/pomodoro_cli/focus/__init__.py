"""Focus mode: the Pomodoro countdown and its terminal display."""

from .engine import TimerEngine, TimerSnapshot, format_time
from .ticker import AsyncioTickSource, ManualTickSource, TickSource, TickSubscription

__all__ = [
    "TimerEngine",
    "TimerSnapshot",
    "format_time",
    "TickSource",
    "TickSubscription",
    "AsyncioTickSource",
    "ManualTickSource",
]
