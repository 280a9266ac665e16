"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real filesystem/API state.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from pomodoro_cli.adapters.sqlite import KeyValueSessionRepository, SqliteKeyValueStore
from pomodoro_cli.exceptions import RemoteStorageError
from pomodoro_cli.models.session import SessionRecord, sort_sessions
from pomodoro_cli.repositories import RemoteSessionRepository

T0 = datetime(2024, 6, 15, 9, 0, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class InMemoryRemote(RemoteSessionRepository):
    """Remote repository kept in a dict; set ``fail`` to simulate an outage."""

    def __init__(self):
        self.records: dict[str, SessionRecord] = {}
        self.fail = False
        self.calls: list[str] = []

    def _check(self, op: str) -> None:
        self.calls.append(op)
        if self.fail:
            raise RemoteStorageError(f"{op} unavailable", status_code=503)

    async def put(self, owner_id, record):
        self._check("put")
        self.records[record.id] = record.model_copy(update={"owner_id": owner_id})

    async def query_by_owner(self, owner_id):
        self._check("query")
        return sort_sessions(r for r in self.records.values() if r.owner_id == owner_id)

    async def delete(self, session_id):
        self._check("delete")
        self.records.pop(session_id, None)

    async def batch_delete_by_owner(self, owner_id):
        self._check("clear")
        self.records = {k: r for k, r in self.records.items() if r.owner_id != owner_id}


class StepClock:
    """Clock that advances one second per call."""

    def __init__(self, start: datetime = T0):
        self.now = start

    def __call__(self) -> datetime:
        value = self.now
        self.now += timedelta(seconds=1)
        return value


def _make_record(**kwargs) -> SessionRecord:
    base = {
        "planned_duration_minutes": 25,
        "actual_duration_minutes": 25,
        "completed": True,
        "started_at": T0,
        "ended_at": T0 + timedelta(minutes=25),
    }
    base.update(kwargs)
    return SessionRecord(**base)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _no_file_logging():
    """Keep CLI invocations from installing the rotating file handler."""
    with patch("pomodoro_cli.main.setup_logging"):
        yield


@pytest.fixture()
def kv_store(tmp_path):
    return SqliteKeyValueStore(tmp_path / "pomodoro.db")


@pytest.fixture()
def local_repo(kv_store):
    return KeyValueSessionRepository(kv_store)


@pytest.fixture()
def remote():
    return InMemoryRemote()


@pytest.fixture()
def clock():
    return StepClock()


@pytest.fixture()
def make_record():
    """Factory for valid SessionRecords; keyword arguments override defaults."""
    return _make_record


@pytest.fixture()
def tmp_config(tmp_path, monkeypatch):
    """Provide a real ConfigService rooted in *tmp_path*.

    Clears the lru_cache so each test gets a fresh service instance.
    """
    from pomodoro_cli.services.config_service import get_config_service

    monkeypatch.setenv("POMODORO_CLI_CONFIG_DIR", str(tmp_path / "config"))
    get_config_service.cache_clear()
    with patch(
        "pomodoro_cli.services.config_service.user_data_dir",
        return_value=str(tmp_path / "data"),
    ):
        svc = get_config_service()
        svc.set_value("storage.db_path", str(tmp_path / "pomodoro.db"))
        yield svc
    get_config_service.cache_clear()
