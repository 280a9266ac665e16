"""Repository abstraction layer for Pomodoro CLI.

Abstract base classes (ports) for everything the core persists. Concrete
adapters live in pomodoro_cli.adapters:
- sqlite: local key-value storage on this device
- rest_api: remote session storage behind the cloud API
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from pomodoro_cli.models.session import SessionRecord


class KeyValueStore(ABC):
    """Durable string key-value storage (preferences-style)."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key; absent keys are ignored."""


class LocalSessionRepository(ABC):
    """Local session collection, always available.

    The whole collection is read and written at once; implementations must
    round-trip ``write_all`` then ``read_all`` without loss.
    """

    @abstractmethod
    def read_all(self) -> list[SessionRecord]:
        """Return every stored record.

        Absent or corrupt data yields an empty list, never an exception.
        """
        raise NotImplementedError(
            "LocalSessionRepository.read_all() must be implemented by adapter"
        )

    @abstractmethod
    def write_all(self, records: Sequence[SessionRecord]) -> None:
        """Overwrite the entire stored collection.

        Raises:
            SessionStoreError: If the underlying storage cannot be written
        """
        raise NotImplementedError(
            "LocalSessionRepository.write_all() must be implemented by adapter"
        )


class RemoteSessionRepository(ABC):
    """Remote session storage, only usable with an owner identity.

    Every call may fail transiently with RemoteStorageError; callers treat
    that as "remote unavailable", not as data loss.
    """

    @abstractmethod
    async def put(self, owner_id: str, record: SessionRecord) -> None:
        """Create or replace the record under its own id, tagged with owner_id."""
        raise NotImplementedError(
            "RemoteSessionRepository.put() must be implemented by adapter"
        )

    @abstractmethod
    async def query_by_owner(self, owner_id: str) -> list[SessionRecord]:
        """Return the owner's records ordered by startedAt descending."""
        raise NotImplementedError(
            "RemoteSessionRepository.query_by_owner() must be implemented by adapter"
        )

    @abstractmethod
    async def delete(self, session_id: str) -> None:
        """Delete one record by id."""
        raise NotImplementedError(
            "RemoteSessionRepository.delete() must be implemented by adapter"
        )

    @abstractmethod
    async def batch_delete_by_owner(self, owner_id: str) -> None:
        """Delete every record belonging to an owner."""
        raise NotImplementedError(
            "RemoteSessionRepository.batch_delete_by_owner() must be implemented by adapter"
        )

    async def close(self) -> None:
        """Release network resources held by the adapter."""
