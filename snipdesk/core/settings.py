"""Application settings loaded from environment variables."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _expand_path(path: str | Path) -> Path:
    """Expand ``~`` and environment variables in a path."""
    return Path(os.path.expandvars(os.path.expanduser(str(path))))


def config_file_path() -> Path:
    return Path.home() / ".config" / "snipdesk" / "config.yaml"


# keys accepted by ``snipdesk config set``
CONFIG_KEYS = ("data_directory",)


def default_config() -> Dict[str, Any]:
    return {"data_directory": str(Path.home() / ".snipdesk" / "snippets")}


def load_config_file() -> Dict[str, Any]:
    """Read the YAML config file; a missing file reads as an empty mapping."""
    path = config_file_path()
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    return data if isinstance(data, dict) else {}


def save_config(data: Dict[str, Any]) -> Path:
    """Write ``data`` to the config file, creating its directory."""
    unknown = sorted(set(data) - set(CONFIG_KEYS))
    if unknown:
        raise ValueError(f"unknown configuration key: {unknown[0]}")
    path = config_file_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        yaml.safe_dump(data, fh, allow_unicode=True, sort_keys=False)
    get_settings.cache_clear()
    return path


def bootstrap_config() -> Path:
    """Write the default config; refuses to overwrite an existing file."""
    path = config_file_path()
    if path.exists():
        raise FileExistsError(f"config file already exists: {path}")
    return save_config(default_config())


def _default_data_dir() -> Path:
    """Resolve the snippets directory when SNIPDESK_DATA_DIR is not set.

    Falls back to ``data_directory`` from ``~/.config/snipdesk/config.yaml``
    and finally to ``~/.snipdesk/snippets``.
    """
    data = load_config_file()
    if data.get("data_directory"):
        return _expand_path(data["data_directory"])
    return Path.home() / ".snipdesk" / "snippets"


class Settings(BaseSettings):
    """Runtime settings for the application."""

    # env: SNIPDESK_DATA_DIR
    data_dir: Path = Field(
        default_factory=_default_data_dir, validation_alias="snipdesk_data_dir"
    )
    # "local" reads data_dir directly, "http" talks to the API at api_url
    store_backend: str = Field(default="local")
    # Base URL of the snippet API used by the HTTP bridge
    api_url: str = Field(default="http://localhost:8000")
    # Shared secret checked by the API when non-empty (header X-Api-Token)
    api_token: str = Field(default="")
    http_timeout: float = Field(default=5.0)
    # Command receiving clipboard text on stdin, e.g. "xclip -selection clipboard"
    clipboard_command: str = Field(default="")
    # env: SNIPDESK_LANG (plain LANG is the system locale)
    lang: str = Field(default="en", validation_alias="snipdesk_lang")
    log_level: str = Field(default="INFO")
    service_name: str = Field(default="snipdesk")
    environment: str = Field(default="development")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("data_dir", mode="before")
    @classmethod
    def _expand_data_dir(cls, value):
        return _expand_path(value) if value else value


@lru_cache
def get_settings() -> Settings:
    """Return application settings instance."""
    return Settings()


__all__ = [
    "Settings",
    "get_settings",
    "config_file_path",
    "CONFIG_KEYS",
    "default_config",
    "load_config_file",
    "save_config",
    "bootstrap_config",
]
