"""Pomodoro countdown state machine.

States move IDLE -> RUNNING <-> PAUSED, and from RUNNING either to
COMPLETED (countdown reached zero) or back to IDLE (cancelled). COMPLETED
is only observable through ``on_state_change``: the engine immediately
seeds the opposite session type in IDLE.

Every completion or cancellation produces exactly one SessionRecord, handed
to the injected ``recorder``. The engine never waits on storage.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pomodoro_cli.exceptions import InvalidDurationError, InvalidTransitionError
from pomodoro_cli.models.session import SessionRecord, SessionType, TimerState
from pomodoro_cli.models.settings import TimerSettings
from pomodoro_cli.utils.logger import get_logger

from .ticker import TickSource, TickSubscription

logger = get_logger(__name__)


def format_time(seconds: int) -> str:
    """Format seconds as MM:SS."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


@dataclass(frozen=True)
class TimerSnapshot:
    """Read-only view of the engine for rendering."""

    state: TimerState
    session_type: SessionType
    total_seconds: int
    remaining_seconds: int
    progress: float
    started_at: datetime | None

    @property
    def elapsed_seconds(self) -> int:
        return self.total_seconds - self.remaining_seconds

    @property
    def display_time(self) -> str:
        return format_time(self.remaining_seconds)


class TimerEngine:
    """Single Pomodoro timer."""

    def __init__(
        self,
        tick_source: TickSource,
        recorder: Callable[[SessionRecord], Any] | None = None,
        settings: TimerSettings | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._tick_source = tick_source
        self._recorder = recorder
        self._settings = settings or TimerSettings()
        self._clock = clock or (lambda: datetime.now().astimezone())

        self._state = TimerState.IDLE
        self._session_type = SessionType.WORK
        self._total_seconds = self._settings.duration_for(SessionType.WORK)
        self._remaining_seconds = self._total_seconds
        self._started_at: datetime | None = None
        self._subscription: TickSubscription | None = None

        self.on_tick: Callable[[TimerSnapshot], None] | None = None
        self.on_state_change: Callable[[TimerState], None] | None = None
        self.on_session_finished: Callable[[SessionRecord], None] | None = None

    # ----- Observable state -----

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def session_type(self) -> SessionType:
        return self._session_type

    @property
    def total_seconds(self) -> int:
        return self._total_seconds

    @property
    def remaining_seconds(self) -> int:
        return self._remaining_seconds

    @property
    def elapsed_seconds(self) -> int:
        return self._total_seconds - self._remaining_seconds

    @property
    def progress(self) -> float:
        """Fraction of the countdown elapsed, in [0, 1]."""
        if self._total_seconds <= 0:
            return 1.0 if self._started_at is not None else 0.0
        value = 1 - self._remaining_seconds / self._total_seconds
        return min(1.0, max(0.0, value))

    @property
    def started_at(self) -> datetime | None:
        return self._started_at

    @property
    def settings(self) -> TimerSettings:
        return self._settings

    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(
            state=self._state,
            session_type=self._session_type,
            total_seconds=self._total_seconds,
            remaining_seconds=self._remaining_seconds,
            progress=self.progress,
            started_at=self._started_at,
        )

    # ----- Operations -----

    def start(self) -> None:
        """Start from IDLE, or toggle pause while running/paused."""
        if self._state is TimerState.RUNNING:
            self.pause()
            return
        if self._state is TimerState.PAUSED:
            self.resume()
            return
        if self._state is not TimerState.IDLE:
            return

        self._started_at = self._clock()
        self._set_state(TimerState.RUNNING)
        logger.debug("%s session started (%ds)", self._session_type.value, self._total_seconds)
        if self._remaining_seconds <= 0:
            self._finish()
            return
        self._subscribe()

    def pause(self) -> None:
        if self._state is not TimerState.RUNNING:
            return
        self._unsubscribe()
        self._set_state(TimerState.PAUSED)

    def resume(self) -> None:
        if self._state is not TimerState.PAUSED:
            return
        self._set_state(TimerState.RUNNING)
        self._subscribe()

    def tick(self) -> None:
        """Advance the countdown by one second."""
        if self._state is not TimerState.RUNNING:
            return
        self._remaining_seconds = max(0, self._remaining_seconds - 1)
        if self.on_tick is not None:
            self.on_tick(self.snapshot())
        if self._remaining_seconds == 0:
            self._finish()

    def cancel(self) -> None:
        """Abandon the current session, recording the whole minutes elapsed."""
        if self._state not in (TimerState.RUNNING, TimerState.PAUSED):
            return
        self._unsubscribe()

        planned = self._total_seconds // 60
        record = SessionRecord(
            planned_duration_minutes=planned,
            actual_duration_minutes=min(planned, self.elapsed_seconds // 60),
            completed=False,
            session_type=self._session_type,
            started_at=self._started_at,
            ended_at=self._clock(),
        )
        logger.info("%s session cancelled after %ds", self._session_type.value, self.elapsed_seconds)

        self._seed(self._session_type)
        self._set_state(TimerState.IDLE)
        self._emit(record)

    def set_custom_time(self, minutes: int) -> None:
        """Replace the countdown with ``minutes`` and return to IDLE.

        Raises:
            InvalidDurationError: If minutes is negative
        """
        if minutes < 0:
            raise InvalidDurationError(f"Duration must be >= 0 minutes, got {minutes}")
        self._unsubscribe()
        self._total_seconds = minutes * 60
        self._remaining_seconds = self._total_seconds
        self._started_at = None
        self._set_state(TimerState.IDLE)

    def set_session_type(self, session_type: SessionType) -> None:
        """Switch session type while IDLE.

        Raises:
            InvalidTransitionError: If the timer is running or paused
        """
        if self._state is not TimerState.IDLE:
            raise InvalidTransitionError(
                f"Cannot change session type while {self._state.value}"
            )
        self._seed(session_type)

    def apply_settings(self, settings: TimerSettings) -> None:
        self._settings = settings
        if self._state is TimerState.IDLE:
            self._seed(self._session_type)

    def reset(self) -> None:
        """Stop without recording and re-seed the current session type."""
        self._unsubscribe()
        self._seed(self._session_type)
        self._set_state(TimerState.IDLE)

    # ----- Internals -----

    def _finish(self) -> None:
        self._unsubscribe()
        self._remaining_seconds = 0

        planned = self._total_seconds // 60
        record = SessionRecord(
            planned_duration_minutes=planned,
            actual_duration_minutes=planned,
            completed=True,
            session_type=self._session_type,
            started_at=self._started_at,
            ended_at=self._clock(),
        )
        self._set_state(TimerState.COMPLETED)
        logger.info("%s session completed", self._session_type.value)
        self._emit(record)

        self._seed(self._session_type.opposite)
        self._set_state(TimerState.IDLE)

    def _seed(self, session_type: SessionType) -> None:
        self._session_type = session_type
        self._total_seconds = self._settings.duration_for(session_type)
        self._remaining_seconds = self._total_seconds
        self._started_at = None

    def _emit(self, record: SessionRecord) -> None:
        if self.on_session_finished is not None:
            self.on_session_finished(record)
        if self._recorder is not None:
            self._recorder(record)

    def _set_state(self, state: TimerState) -> None:
        if state is self._state:
            return
        self._state = state
        if self.on_state_change is not None:
            self.on_state_change(state)

    def _subscribe(self) -> None:
        self._unsubscribe()
        self._subscription = self._tick_source.subscribe(self.tick)

    def _unsubscribe(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
