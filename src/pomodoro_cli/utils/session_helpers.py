"""Helpers for working with session ids on the command line."""

from __future__ import annotations

from pomodoro_cli.exceptions import AmbiguousSessionIdError, SessionNotFoundError
from pomodoro_cli.models.session import SessionRecord
from pomodoro_cli.services.session_store import SessionStore


async def resolve_session(
    store: SessionStore, id_or_prefix: str, owner_id: str | None = None
) -> SessionRecord:
    """
    Resolve a full session id or a unique prefix of one.

    Raises:
        SessionNotFoundError: If nothing matches
        AmbiguousSessionIdError: If the prefix matches several sessions
    """
    records = await store.list_all(owner_id)
    for record in records:
        if record.id == id_or_prefix:
            return record

    matches = [r for r in records if r.id.startswith(id_or_prefix)]
    if not matches:
        raise SessionNotFoundError(id_or_prefix)
    if len(matches) > 1:
        raise AmbiguousSessionIdError(id_or_prefix, [r.id for r in matches])
    return matches[0]
