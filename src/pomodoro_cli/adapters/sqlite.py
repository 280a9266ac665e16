"""SQLite adapters for local storage on this device.

A single ``kv_store`` table backs every local concern: the serialized
session list, the timer settings and the last-known owner id.
"""

from __future__ import annotations

import json
import os
import sqlite3
import time
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

from platformdirs import user_data_dir
from pydantic import ValidationError

from pomodoro_cli.exceptions import SessionStoreError
from pomodoro_cli.models.session import SessionRecord, sort_sessions
from pomodoro_cli.repositories import KeyValueStore, LocalSessionRepository
from pomodoro_cli.utils.logger import get_logger

logger = get_logger(__name__)

LOCAL_SESSIONS_KEY = "local_sessions"


def default_db_path() -> Path:
    """Default location of the local database."""
    return Path(user_data_dir("pomodoro_cli")) / "pomodoro.db"


class SqliteKeyValueStore(KeyValueStore):
    """Key-value store in a local SQLite file.

    Opens a short-lived connection per call, so writes are visible to the
    next read immediately (read-after-write on this device).
    """

    def __init__(self, db_path: str | Path | None = None):
        self.db_path = Path(db_path) if db_path is not None else default_db_path()
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            is_new_database = not self.db_path.exists()
            self._init_database()
            if is_new_database:
                os.chmod(self.db_path, 0o600)
        except (sqlite3.Error, OSError) as e:
            raise SessionStoreError(f"Cannot open local database {self.db_path}: {e}") from e

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(str(self.db_path), timeout=30.0)
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_database(self) -> None:
        with self._connect() as conn:
            conn.execute("PRAGMA journal_mode = WAL")
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT
                )
                """
            )

    @staticmethod
    def _execute_with_retry(
        conn: sqlite3.Connection,
        sql: str,
        params: tuple = (),
        max_retries: int = 3,
    ) -> sqlite3.Cursor:
        """Execute SQL, retrying while another process holds the lock."""
        for attempt in range(max_retries):
            try:
                return conn.execute(sql, params)
            except sqlite3.OperationalError as e:
                if "database is locked" in str(e) and attempt < max_retries - 1:
                    # Exponential backoff: 0.1s, 0.2s, 0.4s
                    time.sleep(0.1 * (2**attempt))
                    continue
                raise
        raise sqlite3.OperationalError("Max retries exceeded")

    def get(self, key: str) -> str | None:
        try:
            with self._connect() as conn:
                row = self._execute_with_retry(
                    conn, "SELECT value FROM kv_store WHERE key = ?", (key,)
                ).fetchone()
        except sqlite3.Error as e:
            raise SessionStoreError(f"Failed to read '{key}': {e}") from e
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        try:
            with self._connect() as conn:
                self._execute_with_retry(
                    conn,
                    """
                    INSERT INTO kv_store(key, value) VALUES(?, ?)
                    ON CONFLICT(key) DO UPDATE SET value=excluded.value
                    """,
                    (key, value),
                )
        except sqlite3.Error as e:
            raise SessionStoreError(f"Failed to write '{key}': {e}") from e

    def delete(self, key: str) -> None:
        try:
            with self._connect() as conn:
                self._execute_with_retry(conn, "DELETE FROM kv_store WHERE key = ?", (key,))
        except sqlite3.Error as e:
            raise SessionStoreError(f"Failed to delete '{key}': {e}") from e


class KeyValueSessionRepository(LocalSessionRepository):
    """Session list serialized as one JSON string under a single key."""

    def __init__(self, store: KeyValueStore, key: str = LOCAL_SESSIONS_KEY):
        self.store = store
        self.key = key

    def read_all(self) -> list[SessionRecord]:
        try:
            raw = self.store.get(self.key)
        except SessionStoreError as e:
            logger.warning("local sessions unreadable, treating as empty: %s", e)
            return []
        if raw is None:
            return []

        try:
            payload = json.loads(raw)
            if not isinstance(payload, list):
                raise ValueError(f"expected a list, got {type(payload).__name__}")
            return [SessionRecord.from_json_dict(item) for item in payload]
        except (json.JSONDecodeError, ValidationError, ValueError, TypeError) as e:
            logger.warning("local sessions corrupt, treating as empty: %s", e)
            return []

    def write_all(self, records: Sequence[SessionRecord]) -> None:
        payload = json.dumps([r.to_json_dict() for r in sort_sessions(records)])
        self.store.set(self.key, payload)
        logger.debug("wrote %d local sessions", len(records))
