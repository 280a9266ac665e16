"""Unit tests for the RecordStore strategies (models/storage_strategy.py)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from pomodoro_cli.exceptions import RemoteStorageError
from pomodoro_cli.models.storage_strategy import (
    LocalRecordStore,
    RecordStore,
    RemoteStatus,
    SyncedRecordStore,
)


def _mock_remote(**side_effects) -> MagicMock:
    remote = MagicMock()
    for name in ("put", "query_by_owner", "delete", "batch_delete_by_owner", "close"):
        setattr(remote, name, AsyncMock(side_effect=side_effects.get(name)))
    remote.query_by_owner.return_value = []
    return remote


# ---------------------------------------------------------------------------
# RecordStore abstract interface
# ---------------------------------------------------------------------------


def test_cannot_instantiate_directly():
    with pytest.raises(TypeError):
        RecordStore()


# ---------------------------------------------------------------------------
# LocalRecordStore
# ---------------------------------------------------------------------------


class TestLocalRecordStore:
    @pytest.mark.asyncio
    async def test_every_remote_call_is_skipped(self, make_record):
        store = LocalRecordStore()

        assert await store.save_remote("u1", make_record()) is RemoteStatus.SKIPPED
        assert await store.fetch_remote("u1") == []
        assert await store.delete_remote("s1") is RemoteStatus.SKIPPED
        assert await store.clear_remote("u1") is RemoteStatus.SKIPPED
        assert store.storage_type == "local"
        await store.close()


# ---------------------------------------------------------------------------
# SyncedRecordStore
# ---------------------------------------------------------------------------


class TestSyncedRecordStore:
    @pytest.mark.asyncio
    async def test_success_reports_synced(self, make_record):
        remote = _mock_remote()
        store = SyncedRecordStore(remote)
        record = make_record(id="s1")

        assert await store.save_remote("u1", record) is RemoteStatus.SYNCED
        assert await store.delete_remote("s1") is RemoteStatus.SYNCED
        assert await store.clear_remote("u1") is RemoteStatus.SYNCED
        remote.put.assert_awaited_once_with("u1", record)
        remote.delete.assert_awaited_once_with("s1")
        remote.batch_delete_by_owner.assert_awaited_once_with("u1")
        assert store.storage_type == "cloud"

    @pytest.mark.asyncio
    async def test_remote_errors_become_failed(self, make_record):
        error = RemoteStorageError("down", status_code=503)
        store = SyncedRecordStore(
            _mock_remote(put=error, delete=error, batch_delete_by_owner=error, query_by_owner=error)
        )

        assert await store.save_remote("u1", make_record()) is RemoteStatus.FAILED
        assert await store.delete_remote("s1") is RemoteStatus.FAILED
        assert await store.clear_remote("u1") is RemoteStatus.FAILED
        assert await store.fetch_remote("u1") is None

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self, make_record):
        store = SyncedRecordStore(_mock_remote(put=KeyError("bug")))

        with pytest.raises(KeyError):
            await store.save_remote("u1", make_record())

    @pytest.mark.asyncio
    async def test_fetch_keeps_only_owner_records(self, make_record):
        remote = _mock_remote()
        remote.query_by_owner.return_value = [
            make_record(id="mine", owner_id="u1"),
            make_record(id="untagged"),
            make_record(id="theirs", owner_id="u2"),
        ]
        store = SyncedRecordStore(remote)

        assert [r.id for r in await store.fetch_remote("u1")] == ["mine"]

    @pytest.mark.asyncio
    async def test_close_closes_remote(self):
        remote = _mock_remote()
        await SyncedRecordStore(remote).close()
        remote.close.assert_awaited_once()
