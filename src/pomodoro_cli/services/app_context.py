"""Wires configuration, storage and identity together for the CLI."""

from __future__ import annotations

from dataclasses import dataclass

from pomodoro_cli.adapters.sqlite import KeyValueSessionRepository, SqliteKeyValueStore
from pomodoro_cli.models.config_models import AppConfig
from pomodoro_cli.services.config_service import ConfigService, get_config_service
from pomodoro_cli.services.identity_service import IdentityService
from pomodoro_cli.services.session_store import SessionStore, create_record_store
from pomodoro_cli.services.settings_service import SettingsService


@dataclass
class AppContext:
    """Everything a command needs, built from the current configuration."""

    config: AppConfig
    session_store: SessionStore
    settings_service: SettingsService
    identity: IdentityService

    @property
    def owner_id(self) -> str | None:
        return self.identity.current_owner_id()

    async def __aenter__(self) -> AppContext:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.session_store.close()


def build_app_context(config_service: ConfigService | None = None) -> AppContext:
    """Build the services for one command invocation.

    The storage mode is read here, once; nothing downstream branches on it.
    """
    config_service = config_service or get_config_service()
    config = config_service.config

    kv_store = SqliteKeyValueStore(config.storage.db_path)
    session_store = SessionStore(
        local=KeyValueSessionRepository(kv_store),
        kv_store=kv_store,
    )
    identity = IdentityService(session_store, config_service.credentials_dir)
    session_store.record_store = create_record_store(config, token_provider=identity.token)

    return AppContext(
        config=config,
        session_store=session_store,
        settings_service=SettingsService(kv_store),
        identity=identity,
    )
