"""Tests for ConfigService."""

from __future__ import annotations

import json

import pytest

from pomodoro_cli.services.config_service import ConfigService


@pytest.fixture
def service(tmp_path):
    return ConfigService(config_dir=tmp_path)


def test_first_run_writes_defaults(service):
    config = service.load_config()

    assert config.storage.mode == "local"
    assert service.config_path.exists()
    assert json.loads(service.config_path.read_text())["storage"]["mode"] == "local"


def test_env_var_selects_config_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("POMODORO_CLI_CONFIG_DIR", str(tmp_path / "custom"))
    assert ConfigService().config_dir == tmp_path / "custom"


def test_set_value_persists(service, tmp_path):
    service.set_value("storage.mode", "cloud")
    service.set_value("api.timeout", "60")
    service.set_value("ui.show_progress_bar", "false")

    reloaded = ConfigService(config_dir=tmp_path).config
    assert reloaded.storage.mode == "cloud"
    assert reloaded.api.timeout == 60
    assert reloaded.ui.show_progress_bar is False


def test_set_value_unknown_key(service):
    with pytest.raises(KeyError):
        service.set_value("storage.colour", "red")


def test_set_value_invalid_leaves_config_untouched(service):
    with pytest.raises(ValueError):
        service.set_value("storage.mode", "ftp")
    assert service.config.storage.mode == "local"


def test_get_value(service):
    assert service.get_value("api.timeout") == 30
    with pytest.raises(KeyError):
        service.get_value("api.nope")


def test_reset_config(service):
    service.set_value("storage.mode", "cloud")

    config = service.reset_config()

    assert config.storage.mode == "local"
    assert service.config.storage.mode == "local"


def test_corrupt_config_raises(service):
    service.config_path.write_text("{broken")
    with pytest.raises(RuntimeError):
        ConfigService(config_dir=service.config_dir).load_config()
