"""Tests for output formatters."""

from __future__ import annotations

import io
import json
from datetime import datetime, timezone
from unittest.mock import patch

import pytest
from rich.console import Console

from pomodoro_cli.models.session import SessionRecord, SessionStats, SessionType
from pomodoro_cli.utils.ui import formatters


@pytest.fixture
def console():
    console = Console(file=io.StringIO(), force_terminal=False, width=120)
    with patch.object(formatters, "get_console", return_value=console):
        yield console


def test_json_output(capsys):
    formatters.format_output({"a": 1}, "json")
    assert json.loads(capsys.readouterr().out) == {"a": 1}


def test_yaml_output(capsys):
    formatters.format_output({"total_sessions": 3}, "yaml")
    assert capsys.readouterr().out.strip() == "total_sessions: 3"


def test_dict_table_output(console):
    formatters.format_output({"enable_sound": True, "db_path": None}, "table")
    output = console.file.getvalue()
    assert "Enable Sound" in output
    assert "✓" in output
    assert "-" in output


def test_sessions_table(console):
    records = [
        SessionRecord(
            id="s1",
            planned_duration_minutes=25,
            actual_duration_minutes=25,
            completed=True,
            started_at=datetime(2024, 6, 15, 9, 0, tzinfo=timezone.utc),
        ),
        SessionRecord(
            id="s2",
            planned_duration_minutes=5,
            actual_duration_minutes=2,
            session_type=SessionType.BREAK,
        ),
    ]

    formatters.format_sessions_table(records)

    output = console.file.getvalue()
    assert "s1" in output and "s2" in output
    assert "completed" in output and "cancelled" in output
    assert "break" in output


def test_empty_sessions_table(console):
    formatters.format_sessions_table([])
    assert "No sessions found" in console.file.getvalue()


def test_stats_panel(console):
    formatters.format_stats(
        SessionStats(
            total_sessions=4,
            completed_sessions=3,
            cancelled_sessions=1,
            total_work_time=65,
            average_session_length=16.25,
            completion_rate=75.0,
        )
    )
    output = console.file.getvalue()
    assert "1h 5m" in output
    assert "16.2 min" in output or "16.3 min" in output
    assert "75.0%" in output


@pytest.mark.parametrize("pct,color", [(90, "green"), (60, "yellow"), (10, "red")])
def test_completion_color(pct, color):
    assert formatters.get_completion_color(pct) == color


def test_message_helpers(console):
    formatters.format_error("e")
    formatters.format_success("s")
    formatters.format_warning("w")
    formatters.format_info("i")
    output = console.file.getvalue()
    for label in ("Error:", "Success:", "Warning:", "Info:"):
        assert label in output
