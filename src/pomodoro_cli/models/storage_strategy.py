"""
Strategy Pattern: record-store capability.

Session history is always written locally. Whether it is also mirrored to
the cloud is decided once, when the SessionStore is built, by choosing one
of the RecordStore implementations below. The SessionStore never branches
on the storage mode itself.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum

from pomodoro_cli.exceptions import RemoteStorageError
from pomodoro_cli.repositories import RemoteSessionRepository
from pomodoro_cli.utils.logger import get_logger

from .session import SessionRecord

logger = get_logger(__name__)


class RemoteStatus(str, Enum):
    """Outcome of the remote half of a store operation."""

    SKIPPED = "skipped"  # no remote, or no owner identity
    SYNCED = "synced"
    FAILED = "failed"


class RecordStore(ABC):
    """
    Abstract remote capability of the session store.

    Every method is best-effort: implementations never raise for remote
    trouble, they report it through RemoteStatus (or an empty result).
    """

    @abstractmethod
    async def save_remote(self, owner_id: str, record: SessionRecord) -> RemoteStatus:
        """Create or replace the remote copy of a record."""

    @abstractmethod
    async def fetch_remote(self, owner_id: str) -> list[SessionRecord] | None:
        """Fetch the owner's remote records; None when unavailable."""

    @abstractmethod
    async def delete_remote(self, session_id: str) -> RemoteStatus:
        """Delete the remote copy of a record."""

    @abstractmethod
    async def clear_remote(self, owner_id: str) -> RemoteStatus:
        """Delete every remote record of an owner."""

    @property
    @abstractmethod
    def storage_type(self) -> str:
        """Storage type identifier (for logging/debugging)."""

    async def close(self) -> None:
        """Release resources held by the strategy."""


class LocalRecordStore(RecordStore):
    """
    Local-only strategy.

    Used when the storage mode is 'local'; every remote call is skipped.
    """

    async def save_remote(self, owner_id: str, record: SessionRecord) -> RemoteStatus:
        return RemoteStatus.SKIPPED

    async def fetch_remote(self, owner_id: str) -> list[SessionRecord] | None:
        return []

    async def delete_remote(self, session_id: str) -> RemoteStatus:
        return RemoteStatus.SKIPPED

    async def clear_remote(self, owner_id: str) -> RemoteStatus:
        return RemoteStatus.SKIPPED

    @property
    def storage_type(self) -> str:
        return "local"


class SyncedRecordStore(RecordStore):
    """
    Local + remote strategy.

    Mirrors writes to a RemoteSessionRepository. A RemoteStorageError is
    logged and reduced to RemoteStatus.FAILED; the local write it
    accompanies is unaffected.
    """

    def __init__(self, remote: RemoteSessionRepository):
        """
        Initialize synced strategy.

        Args:
            remote: Remote session repository (REST API or test double)
        """
        self.remote = remote

    async def save_remote(self, owner_id: str, record: SessionRecord) -> RemoteStatus:
        try:
            await self.remote.put(owner_id, record)
        except RemoteStorageError as e:
            logger.warning("remote save failed for %s: %s", record.id, e)
            return RemoteStatus.FAILED
        logger.debug("remote save ok: %s", record.id)
        return RemoteStatus.SYNCED

    async def fetch_remote(self, owner_id: str) -> list[SessionRecord] | None:
        try:
            records = await self.remote.query_by_owner(owner_id)
        except RemoteStorageError as e:
            logger.warning("remote query failed for owner %s: %s", owner_id, e)
            return None
        return [r for r in records if r.owner_id == owner_id]

    async def delete_remote(self, session_id: str) -> RemoteStatus:
        try:
            await self.remote.delete(session_id)
        except RemoteStorageError as e:
            logger.warning("remote delete failed for %s: %s", session_id, e)
            return RemoteStatus.FAILED
        return RemoteStatus.SYNCED

    async def clear_remote(self, owner_id: str) -> RemoteStatus:
        try:
            await self.remote.batch_delete_by_owner(owner_id)
        except RemoteStorageError as e:
            logger.warning("remote clear failed for owner %s: %s", owner_id, e)
            return RemoteStatus.FAILED
        return RemoteStatus.SYNCED

    async def close(self) -> None:
        await self.remote.close()

    @property
    def storage_type(self) -> str:
        return "cloud"
