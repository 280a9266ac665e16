"""Configuration models for Pomodoro CLI.

Storage mode decides, once at startup, whether session history is kept
locally only or mirrored to the cloud API.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class APIConfig(BaseModel):
    """Cloud API configuration."""

    endpoint: str = Field(default="https://pomodoro.example.com/api")
    timeout: int = Field(default=30, ge=1)

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("endpoint cannot be empty")
        return v.strip().rstrip("/")


class StorageConfig(BaseModel):
    """Session storage configuration."""

    mode: Literal["local", "cloud"] = Field(
        default="local", description="local = this device only, cloud = local + remote"
    )
    db_path: str | None = Field(
        default=None, description="SQLite file for local history (default: data dir)"
    )


class UIConfig(BaseModel):
    """Terminal UI configuration."""

    show_progress_bar: bool = Field(default=True)


class AppConfig(BaseModel):
    """Main Pomodoro CLI configuration."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    api: APIConfig = Field(default_factory=APIConfig)
    ui: UIConfig = Field(default_factory=UIConfig)
