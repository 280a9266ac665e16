"""Configuration service for managing Pomodoro CLI configuration.

This module provides the ConfigService class, the single source of truth
for configuration in Pomodoro CLI. It handles:

- Loading and saving config.json
- Dotted-key updates (``storage.mode``, ``api.endpoint``...)
- Config file initialization with sensible defaults
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir, user_data_dir
from pydantic import BaseModel, ValidationError

from pomodoro_cli.models.config_models import AppConfig

CONFIG_DIR_ENV = "POMODORO_CLI_CONFIG_DIR"


class ConfigService:
    """Service for managing application configuration."""

    def __init__(self, config_dir: str | Path | None = None):
        """Initialize the config service.

        Args:
            config_dir: Directory for config.json and credentials; defaults to
                ``$POMODORO_CLI_CONFIG_DIR`` or the platform config dir
        """
        if config_dir is None:
            config_dir = os.environ.get(CONFIG_DIR_ENV) or user_config_dir("pomodoro_cli")

        self.config_dir = Path(config_dir)
        self.config_path = self.config_dir / "config.json"
        self.credentials_dir = self.config_dir / "credentials"
        self.data_dir = Path(user_data_dir("pomodoro_cli"))

        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.credentials_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Load configuration from storage."""
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # First run
            self._config = AppConfig()
            self.save_config()
        except (OSError, ValidationError) as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self) -> None:
        """Save the current configuration to storage."""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self.config.model_dump_json(indent=4))

            self.config_path.chmod(0o600)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def reset_config(self) -> AppConfig:
        """Reset configuration to defaults."""
        if self.config_path.exists():
            self.config_path.unlink()
        self._config = AppConfig()
        self.save_config()
        return self._config

    def get_value(self, key: str) -> Any:
        """Get a config value by dotted key, e.g. ``storage.mode``."""
        node: Any = self.config
        for part in key.split("."):
            if not isinstance(node, BaseModel) or part not in type(node).model_fields:
                raise KeyError(f"Unknown config key: {key}")
            node = getattr(node, part)
        return node

    def set_value(self, key: str, value: Any) -> AppConfig:
        """Set a config value by dotted key and save.

        The whole config is re-validated, so a bad value leaves the saved
        file untouched.

        Raises:
            KeyError: If the key does not exist
            ValueError: If the value fails validation
        """
        self.get_value(key)

        data = self.config.model_dump()
        *parents, leaf = key.split(".")
        node = data
        for part in parents:
            node = node[part]
        node[leaf] = value

        try:
            new_config = AppConfig.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Invalid value for {key}: {e.errors()[0]['msg']}") from e

        self._config = new_config
        self.save_config()
        return new_config


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service
