"""Tests for session id resolution."""

from __future__ import annotations

import pytest
import pytest_asyncio

from pomodoro_cli.exceptions import AmbiguousSessionIdError, SessionNotFoundError
from pomodoro_cli.services.session_store import SessionStore
from pomodoro_cli.utils.exit_codes import ERROR_NOT_FOUND, get_exit_code_name
from pomodoro_cli.utils.session_helpers import resolve_session


@pytest_asyncio.fixture
async def store(local_repo, kv_store, make_record):
    store = SessionStore(local_repo, kv_store)
    for session_id in ("abc123", "abd456", "xyz789"):
        await store.save(make_record(id=session_id))
    return store


@pytest.mark.asyncio
async def test_exact_id(store):
    assert (await resolve_session(store, "xyz789")).id == "xyz789"


@pytest.mark.asyncio
async def test_unique_prefix(store):
    assert (await resolve_session(store, "abc")).id == "abc123"


@pytest.mark.asyncio
async def test_ambiguous_prefix(store):
    with pytest.raises(AmbiguousSessionIdError) as exc_info:
        await resolve_session(store, "ab")
    assert sorted(exc_info.value.matches) == ["abc123", "abd456"]


@pytest.mark.asyncio
async def test_no_match(store):
    with pytest.raises(SessionNotFoundError):
        await resolve_session(store, "nope")


def test_exit_code_names():
    assert get_exit_code_name(ERROR_NOT_FOUND) == "ERROR_NOT_FOUND"
    assert get_exit_code_name(99) == "UNKNOWN(99)"
