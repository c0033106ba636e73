"""Configuration tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

from carnes.config import DEFAULT_DATA_FILE, get_current_config, load_settings, save_config


@pytest.fixture
def clean_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("CARNES_DATA_FILE", raising=False)
    monkeypatch.delenv("CARNES_LOG_LEVEL", raising=False)
    return tmp_path


def test_defaults_without_env_file(clean_env):
    settings = load_settings()
    assert settings.data_file == Path(DEFAULT_DATA_FILE)
    assert settings.log_level == "WARNING"
    assert get_current_config() == {"data_file": None, "log_level": None}


def test_reads_env_file(clean_env):
    (clean_env / ".env").write_text("CARNES_DATA_FILE=loja.json\nCARNES_LOG_LEVEL=debug\n")

    settings = load_settings()
    assert settings.data_file == Path("loja.json")
    assert settings.log_level == "DEBUG"


def test_environment_overrides_env_file(clean_env, monkeypatch):
    (clean_env / ".env").write_text("CARNES_DATA_FILE=loja.json\n")
    monkeypatch.setenv("CARNES_DATA_FILE", "other.json")

    assert load_settings().data_file == Path("other.json")


def test_save_config_writes_env_file(clean_env):
    env_path = save_config(data_file="dados/carnes.json", log_level="info")

    assert env_path == clean_env / ".env"
    assert get_current_config() == {"data_file": "dados/carnes.json", "log_level": "INFO"}

    save_config(log_level="ERROR")
    assert get_current_config() == {"data_file": "dados/carnes.json", "log_level": "ERROR"}


def test_invalid_log_level_rejected(clean_env):
    with pytest.raises(PydanticValidationError):
        save_config(log_level="LOUD")
    assert not (clean_env / ".env").exists()
