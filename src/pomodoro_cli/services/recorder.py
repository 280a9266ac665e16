"""Hands finished sessions from the timer engine to the SessionStore."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from pomodoro_cli.models.session import SessionRecord
from pomodoro_cli.services.session_store import SessionStore, WriteResult
from pomodoro_cli.utils.logger import get_logger

logger = get_logger(__name__)


class SessionRecorder:
    """Engine ``recorder`` callable that saves records in the background.

    Each record becomes an asyncio task, so the tick loop never waits on
    storage. Pausing or cancelling the timer does not cancel a write already
    in flight; call ``drain()`` before the loop shuts down.
    """

    def __init__(
        self,
        store: SessionStore,
        owner_provider: Callable[[], str | None] = lambda: None,
    ):
        self.store = store
        self.owner_provider = owner_provider
        self.pending: list[asyncio.Task[WriteResult]] = []
        self.results: list[WriteResult] = []
        self.failures: list[BaseException] = []

    def __call__(self, record: SessionRecord) -> asyncio.Task[WriteResult]:
        task = asyncio.get_running_loop().create_task(
            self.store.save(record, self.owner_provider())
        )
        task.add_done_callback(self._on_done)
        self.pending.append(task)
        return task

    def _on_done(self, task: asyncio.Task[WriteResult]) -> None:
        if task in self.pending:
            self.pending.remove(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("failed to record session: %s", error)
            self.failures.append(error)
            return
        self.results.append(task.result())

    async def drain(self) -> list[WriteResult]:
        """Wait for every in-flight write.

        Writes that failed before the call are reported too; each failure is
        raised once.

        Raises:
            SessionStoreError: If a local write failed
        """
        if self.pending:
            await asyncio.gather(*list(self.pending), return_exceptions=True)
        if self.failures:
            failures, self.failures = self.failures, []
            raise failures[0]
        return list(self.results)
