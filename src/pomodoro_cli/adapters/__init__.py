"""Adapters module - Repository implementations for different storage backends.

- sqlite: local key-value storage on this device
- rest_api: remote session storage behind the cloud API
"""

from .rest_api import RestApiSessionRepository
from .sqlite import KeyValueSessionRepository, SqliteKeyValueStore

__all__ = [
    "KeyValueSessionRepository",
    "SqliteKeyValueStore",
    "RestApiSessionRepository",
]
