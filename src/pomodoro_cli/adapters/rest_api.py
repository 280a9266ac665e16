"""REST API adapter - remote session storage behind the cloud API.

Wraps an ``httpx.AsyncClient``. Every transport error, non-2xx response or
malformed body is raised as RemoteStorageError so the store can degrade to
local-only behaviour.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx
from pydantic import ValidationError

from pomodoro_cli.exceptions import RemoteStorageError
from pomodoro_cli.models.session import SessionRecord, sort_sessions
from pomodoro_cli.repositories import RemoteSessionRepository
from pomodoro_cli.utils.logger import get_logger

logger = get_logger(__name__)

SESSIONS_PATH = "/v1/sessions"


class RestApiSessionRepository(RemoteSessionRepository):
    """Session repository implementation using the cloud REST API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        token_provider: Callable[[], str | None] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize REST API session repository.

        Args:
            base_url: API root, e.g. https://pomodoro.example.com/api
            timeout: Request timeout in seconds
            token_provider: Returns the bearer token of the signed-in user
            transport: Optional httpx transport (tests use MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._token_provider = token_provider
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> RestApiSessionRepository:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _get_headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        try:
            token = self._token_provider() if self._token_provider else None
        except Exception as e:
            raise RemoteStorageError(f"could not read API token: {e}") from e
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            )
        # token can change between requests
        self._client.headers.update(self._get_headers())
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        *,
        allow_not_found: bool = False,
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            response = await self._get_client().request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise RemoteStorageError(f"{method} {path} failed: {e}") from e

        if allow_not_found and response.status_code == 404:
            return response
        if response.status_code >= 400:
            raise RemoteStorageError(
                f"{method} {path} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response

    async def put(self, owner_id: str, record: SessionRecord) -> None:
        body = record.model_copy(update={"owner_id": owner_id}).to_json_dict()
        await self._request("PUT", f"{SESSIONS_PATH}/{record.id}", json=body)

    async def query_by_owner(self, owner_id: str) -> list[SessionRecord]:
        response = await self._request(
            "GET", SESSIONS_PATH, params={"owner_id": owner_id}
        )
        try:
            data = response.json()
        except ValueError as e:
            raise RemoteStorageError(f"Malformed session list: {e}") from e

        items = data.get("sessions", []) if isinstance(data, dict) else data
        if not isinstance(items, list):
            raise RemoteStorageError("Malformed session list: expected an array")

        records = []
        for item in items:
            try:
                records.append(SessionRecord.from_json_dict(item))
            except (ValidationError, TypeError) as e:
                # skip, keep the rest
                logger.warning("skipping unparsable remote session: %s", e)
        return sort_sessions(records)

    async def delete(self, session_id: str) -> None:
        await self._request(
            "DELETE", f"{SESSIONS_PATH}/{session_id}", allow_not_found=True
        )

    async def batch_delete_by_owner(self, owner_id: str) -> None:
        await self._request("DELETE", SESSIONS_PATH, params={"owner_id": owner_id})
