"""Configuration read from and written to a .env file."""

import logging
import os
from pathlib import Path

from dotenv import dotenv_values, set_key
from pydantic import BaseModel, Field, field_validator

DEFAULT_DATA_FILE = "carnes.json"
DEFAULT_LOG_LEVEL = "WARNING"

ENV_DATA_FILE = "CARNES_DATA_FILE"
ENV_LOG_LEVEL = "CARNES_LOG_LEVEL"


class Settings(BaseModel):
    """Resolved application settings."""

    data_file: Path = Field(Path(DEFAULT_DATA_FILE), description="JSON file holding the bills")
    log_level: str = Field(DEFAULT_LOG_LEVEL, description="Logging level name")

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


def get_env_path() -> Path:
    """Get the path to the .env file (current directory)."""
    return Path.cwd() / ".env"


def get_current_config() -> dict[str, str | None]:
    """Read current configuration from the .env file."""
    env_path = get_env_path()
    if env_path.exists():
        values = dotenv_values(env_path)
        return {
            "data_file": values.get(ENV_DATA_FILE),
            "log_level": values.get(ENV_LOG_LEVEL),
        }
    return {
        "data_file": None,
        "log_level": None,
    }


def load_settings() -> Settings:
    """
    Resolve settings.

    Process environment variables win over the .env file, which wins over
    the defaults.
    """
    file_config = get_current_config()
    data_file = os.getenv(ENV_DATA_FILE) or file_config["data_file"] or DEFAULT_DATA_FILE
    log_level = os.getenv(ENV_LOG_LEVEL) or file_config["log_level"] or DEFAULT_LOG_LEVEL
    return Settings(data_file=Path(data_file), log_level=log_level)


def save_config(data_file: str | None = None, log_level: str | None = None) -> Path:
    """Write the given settings to the .env file and return its path."""
    # Validate before touching the file
    current = load_settings()
    Settings(
        data_file=Path(data_file) if data_file else current.data_file,
        log_level=log_level or current.log_level,
    )

    env_path = get_env_path()
    if not env_path.exists():
        env_path.touch()

    if data_file:
        set_key(str(env_path), ENV_DATA_FILE, data_file)
    if log_level:
        set_key(str(env_path), ENV_LOG_LEVEL, log_level.strip().upper())
    return env_path
