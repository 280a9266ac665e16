"""Session store: durable local history with best-effort cloud mirroring.

Local writes are the success criterion of every operation. Remote calls go
through the RecordStore strategy chosen at construction and can only
downgrade a result's ``remote`` status, never fail the call.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from pomodoro_cli.exceptions import SessionNotFoundError
from pomodoro_cli.models.config_models import AppConfig
from pomodoro_cli.models.session import SessionRecord, SessionStats, sort_sessions
from pomodoro_cli.models.storage_strategy import (
    LocalRecordStore,
    RecordStore,
    RemoteStatus,
    SyncedRecordStore,
)
from pomodoro_cli.repositories import KeyValueStore, LocalSessionRepository
from pomodoro_cli.utils.logger import get_logger

logger = get_logger(__name__)

OWNER_ID_KEY = "current_user_id"


@dataclass(frozen=True)
class WriteResult:
    """Result of a store write.

    ``session_id`` is the id the record is stored under. ``remote`` tells
    callers who care (e.g. to show a warning) what happened remotely.
    """

    session_id: str | None
    remote: RemoteStatus = RemoteStatus.SKIPPED

    @property
    def remote_failed(self) -> bool:
        return self.remote is RemoteStatus.FAILED


class SyncResult:
    """Result of pushing local history to the remote store."""

    def __init__(self):
        self.sessions_local = 0
        self.sessions_uploaded = 0
        self.sessions_unchanged = 0
        self.sessions_skipped = 0
        self.sessions_failed = 0

        self.success = False
        self.error: str | None = None


def compare_timestamps(
    local_updated_at: datetime | None,
    remote_updated_at: datetime | None,
) -> Literal["local", "remote", "equal"]:
    """Compare two update timestamps to determine which copy is newer."""
    if local_updated_at is None and remote_updated_at is None:
        return "equal"
    if local_updated_at is None:
        return "remote"
    if remote_updated_at is None:
        return "local"
    if local_updated_at > remote_updated_at:
        return "local"
    if remote_updated_at > local_updated_at:
        return "remote"
    return "equal"


def merge_sessions(
    local: Iterable[SessionRecord], remote: Iterable[SessionRecord]
) -> list[SessionRecord]:
    """Union of both sides, one record per id, newest first.

    Copies sharing an id are reconciled last-write-wins on ``updated_at``;
    on a tie the remote (confirmed) copy is kept.
    """
    merged: dict[str, SessionRecord] = {}
    for record in local:
        merged[record.id] = record
    for record in remote:
        existing = merged.get(record.id)
        if existing is None or compare_timestamps(
            existing.updated_at, record.updated_at
        ) != "local":
            merged[record.id] = record
    return sort_sessions(merged.values())


class SessionStore:
    """Session history for one user on one device."""

    def __init__(
        self,
        local: LocalSessionRepository,
        kv_store: KeyValueStore,
        record_store: RecordStore | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize the store.

        Args:
            local: Local session repository (always written)
            kv_store: Key-value storage for the remembered owner id
            record_store: Remote strategy; defaults to local-only
            clock: Source of ``updated_at`` stamps
        """
        self.local = local
        self.kv_store = kv_store
        self.record_store = record_store or LocalRecordStore()
        self._clock = clock or (lambda: datetime.now().astimezone())

    @property
    def storage_type(self) -> str:
        return self.record_store.storage_type

    async def close(self) -> None:
        await self.record_store.close()

    # ----- Writes -----

    async def save(self, record: SessionRecord, owner_id: str | None = None) -> WriteResult:
        """Store a finished session locally, then mirror it remotely.

        Returns:
            WriteResult carrying the id the record is stored under

        Raises:
            SessionStoreError: If the local write fails
        """
        stamped = self._stamp(record, owner_id)
        self._write_local(
            lambda records: [r for r in records if r.id != stamped.id] + [stamped]
        )
        logger.info("session saved locally: %s", stamped.id)

        remote = await self._mirror(owner_id, stamped)
        return WriteResult(stamped.id, remote)

    async def update(self, record: SessionRecord, owner_id: str | None = None) -> WriteResult:
        """Replace the record with the same id, locally and remotely."""
        stamped = self._stamp(record, owner_id)
        self._write_local(
            lambda records: [r for r in records if r.id != stamped.id] + [stamped]
        )
        logger.info("session updated locally: %s", stamped.id)

        remote = await self._mirror(owner_id, stamped)
        return WriteResult(stamped.id, remote)

    async def delete(self, session_id: str, owner_id: str | None = None) -> WriteResult:
        """Remove a session locally, then best-effort remotely."""
        self._write_local(lambda records: [r for r in records if r.id != session_id])
        logger.info("session deleted locally: %s", session_id)

        remote = RemoteStatus.SKIPPED
        if owner_id:
            remote = await self.record_store.delete_remote(session_id)
        return WriteResult(session_id, remote)

    async def clear(self, owner_id: str | None = None) -> WriteResult:
        """Delete the whole history, and the owner's remote copy if signed in."""
        self._write_local(lambda records: [])
        logger.info("local session history cleared")

        remote = RemoteStatus.SKIPPED
        if owner_id:
            remote = await self.record_store.clear_remote(owner_id)
        return WriteResult(None, remote)

    # ----- Reads -----

    async def list_all(self, owner_id: str | None = None) -> list[SessionRecord]:
        """Local history merged with the owner's remote history, newest first."""
        local = self.local.read_all()
        if not owner_id:
            return merge_sessions(local, [])

        remote = await self.record_store.fetch_remote(owner_id)
        if remote is None:
            logger.info("remote unavailable, listing local sessions only")
            remote = []
        merged = merge_sessions(local, remote)
        logger.debug(
            "merged %d local + %d remote into %d sessions",
            len(local),
            len(remote),
            len(merged),
        )
        return merged

    async def list_completed(self, owner_id: str | None = None) -> list[SessionRecord]:
        return [r for r in await self.list_all(owner_id) if r.completed]

    async def list_cancelled(self, owner_id: str | None = None) -> list[SessionRecord]:
        return [r for r in await self.list_all(owner_id) if r.is_cancelled]

    async def stats(self, owner_id: str | None = None) -> SessionStats:
        return SessionStats.from_records(await self.list_all(owner_id))

    async def get(self, session_id: str, owner_id: str | None = None) -> SessionRecord:
        """Look up one session in the merged history.

        Raises:
            SessionNotFoundError: If no session has that id
        """
        for record in await self.list_all(owner_id):
            if record.id == session_id:
                return record
        raise SessionNotFoundError(session_id)

    # ----- Sync -----

    async def sync(self, owner_id: str) -> SyncResult:
        """Upload local sessions the remote is missing or holds an older copy of.

        Retries writes whose remote half failed earlier. Per-record failures
        are counted, not raised.
        """
        result = SyncResult()
        local = self.local.read_all()
        result.sessions_local = len(local)

        remote = await self.record_store.fetch_remote(owner_id)
        if remote is None:
            result.error = "Remote storage unavailable"
            return result
        remote_by_id = {r.id: r for r in remote}

        for record in local:
            theirs = remote_by_id.get(record.id)
            if theirs is not None and compare_timestamps(
                record.updated_at, theirs.updated_at
            ) != "local":
                result.sessions_unchanged += 1
                continue

            status = await self.record_store.save_remote(
                owner_id, record.model_copy(update={"owner_id": owner_id})
            )
            if status is RemoteStatus.SYNCED:
                result.sessions_uploaded += 1
            elif status is RemoteStatus.FAILED:
                result.sessions_failed += 1
            else:
                result.sessions_skipped += 1

        result.success = result.sessions_failed == 0
        logger.info(
            "sync for %s: %d uploaded, %d unchanged, %d failed",
            owner_id,
            result.sessions_uploaded,
            result.sessions_unchanged,
            result.sessions_failed,
        )
        return result

    # ----- Owner identity -----

    def remember_owner(self, owner_id: str) -> None:
        """Persist the signed-in owner so later reads need no identity lookup."""
        self.kv_store.set(OWNER_ID_KEY, owner_id)

    def remembered_owner(self) -> str | None:
        return self.kv_store.get(OWNER_ID_KEY) or None

    def forget_owner(self) -> None:
        self.kv_store.delete(OWNER_ID_KEY)

    # ----- Internals -----

    def _stamp(self, record: SessionRecord, owner_id: str | None) -> SessionRecord:
        return record.model_copy(
            update={
                "owner_id": owner_id or record.owner_id,
                "updated_at": self._clock(),
            }
        )

    def _write_local(
        self, change: Callable[[list[SessionRecord]], list[SessionRecord]]
    ) -> None:
        records = self.local.read_all()
        self.local.write_all(sort_sessions(change(records)))

    async def _mirror(self, owner_id: str | None, record: SessionRecord) -> RemoteStatus:
        if not owner_id:
            return RemoteStatus.SKIPPED
        return await self.record_store.save_remote(owner_id, record)


def create_record_store(
    config: AppConfig,
    token_provider: Callable[[], str | None] | None = None,
) -> RecordStore:
    """Pick the remote strategy from the configured storage mode."""
    if config.storage.mode == "cloud":
        from pomodoro_cli.adapters.rest_api import RestApiSessionRepository

        remote = RestApiSessionRepository(
            base_url=config.api.endpoint,
            timeout=config.api.timeout,
            token_provider=token_provider,
        )
        return SyncedRecordStore(remote)
    return LocalRecordStore()

