"""Repository interfaces for Pomodoro CLI.

These are the "Ports" of the core. Implementations (Adapters) are in:
- pomodoro_cli.adapters.sqlite (local storage)
- pomodoro_cli.adapters.rest_api (remote API)
"""

from .repository import (
    KeyValueStore,
    LocalSessionRepository,
    RemoteSessionRepository,
)

__all__ = [
    "KeyValueStore",
    "LocalSessionRepository",
    "RemoteSessionRepository",
]
