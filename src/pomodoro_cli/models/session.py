"""Session record data models."""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class SessionType(str, Enum):
    """Kind of interval being timed."""

    WORK = "WORK"
    BREAK = "BREAK"

    @property
    def opposite(self) -> SessionType:
        """The session type that follows this one in a Pomodoro cycle."""
        return SessionType.BREAK if self is SessionType.WORK else SessionType.WORK


class TimerState(str, Enum):
    """Timer engine states."""

    IDLE = "IDLE"
    RUNNING = "RUNNING"
    PAUSED = "PAUSED"
    COMPLETED = "COMPLETED"


def new_session_id() -> str:
    """Mint a session identifier shared by the local and remote copies."""
    return uuid.uuid4().hex


def _as_aware(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SessionRecord(BaseModel):
    """One finished work or break interval.

    Serialized with camelCase names (``plannedDurationMinutes``,
    ``startedAt``...) so the local JSON blob and the remote documents share
    one format.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(default_factory=new_session_id, min_length=1)
    planned_duration_minutes: int = Field(ge=0)
    actual_duration_minutes: int = Field(default=0, ge=0)
    completed: bool = False
    session_type: SessionType = SessionType.WORK
    started_at: datetime | None = None
    ended_at: datetime | None = None
    owner_id: str | None = None
    updated_at: datetime | None = None

    @field_validator("started_at", "ended_at", "updated_at")
    @classmethod
    def _ensure_timezone(cls, value: datetime | None) -> datetime | None:
        # Naive timestamps are taken as UTC so records stay comparable.
        return _as_aware(value)

    @model_validator(mode="after")
    def _check_invariants(self) -> SessionRecord:
        if self.actual_duration_minutes > self.planned_duration_minutes:
            raise ValueError(
                "actualDurationMinutes cannot exceed plannedDurationMinutes"
            )
        if (
            self.started_at is not None
            and self.ended_at is not None
            and self.ended_at < self.started_at
        ):
            raise ValueError("endedAt must not precede startedAt")
        return self

    @property
    def sort_key(self) -> float:
        """Start time as epoch seconds; records never started sort as 0."""
        return self.started_at.timestamp() if self.started_at else 0.0

    @property
    def is_cancelled(self) -> bool:
        return not self.completed

    def to_json_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dict using serialized field names."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_json_dict(cls, data: dict[str, Any]) -> SessionRecord:
        """Create from a dict produced by ``to_json_dict`` or the remote API."""
        return cls.model_validate(data)


def sort_sessions(records: Iterable[SessionRecord]) -> list[SessionRecord]:
    """Sort newest first by ``started_at``; records without one go last."""
    return sorted(records, key=lambda r: r.sort_key, reverse=True)


class SessionStats(BaseModel):
    """Aggregate statistics, always derived from the current session set.

    Every figure covers all sessions regardless of type or completion, so
    ``average_session_length`` is total actual minutes over session count.
    """

    total_sessions: int = 0
    completed_sessions: int = 0
    cancelled_sessions: int = 0
    total_work_time: int = 0  # minutes
    average_session_length: float = 0.0  # minutes
    completion_rate: float = 0.0  # percent

    @classmethod
    def from_records(cls, records: Iterable[SessionRecord]) -> SessionStats:
        records = list(records)
        total = len(records)
        completed = sum(1 for r in records if r.completed)
        total_minutes = sum(r.actual_duration_minutes for r in records)

        return cls(
            total_sessions=total,
            completed_sessions=completed,
            cancelled_sessions=total - completed,
            total_work_time=total_minutes,
            average_session_length=(total_minutes / total) if total > 0 else 0.0,
            completion_rate=(completed / total * 100) if total > 0 else 0.0,
        )
