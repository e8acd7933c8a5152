"""
env_perm Configuration Management

Handles loading configuration from environment variables and an optional
config.yaml with validation using Pydantic.
"""

import os
from pathlib import Path
from typing import Annotated, Any, Literal

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


ENV_PREFIX = "ENV_PERM_"

# Login shells read these in this order, so the first existing one wins.
DEFAULT_PROFILE_CANDIDATES = [".bash_profile", ".bash_login", ".profile"]


def get_config_path() -> Path:
    """
    Get the path of the optional YAML config file.

    ENV_PERM_CONFIG wins; otherwise $XDG_CONFIG_HOME/env_perm/config.yaml,
    falling back to ~/.config/env_perm/config.yaml.
    """
    explicit = os.environ.get(f"{ENV_PREFIX}CONFIG")
    if explicit:
        return Path(explicit)

    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / "env_perm" / "config.yaml"
    return Path.home() / ".config" / "env_perm" / "config.yaml"


def load_yaml_config(path: Path | None = None) -> dict[str, Any]:
    """Load configuration from config.yaml if it exists."""
    config_path = path or get_config_path()

    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{config_path} must contain a mapping of settings")
        return data

    return {}


class Settings(BaseSettings):
    """Settings controlling where and how variables are persisted."""

    home: str = Field(default="", description="Home directory override (defaults to $HOME)")
    profile_candidates: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_PROFILE_CANDIDATES),
        description="Profile file names searched in order",
    )
    default_profile: str = Field(
        default=".bash_profile",
        description="Profile created when no candidate exists",
    )
    registry_key: str = Field(
        default="Environment",
        description="Sub key of HKEY_CURRENT_USER holding user variables",
    )
    store: Literal["auto", "file", "registry"] = Field(
        default="auto",
        description="Store to use (auto picks the registry on Windows)",
    )
    path_match: Literal["token", "substring"] = Field(
        default="token",
        description="How append/prepend detect an existing path entry",
    )
    consult_process_env: bool = Field(
        default=False,
        description="Treat variables in the current process environment as already set",
    )
    log_level: str = Field(default="WARNING", description="Log level for the CLI")

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX)

    @field_validator("profile_candidates", mode="before")
    @classmethod
    def parse_comma_separated(cls, v: Any) -> list[str]:
        if isinstance(v, str):
            return [x.strip() for x in v.split(",") if x.strip()]
        return v or list(DEFAULT_PROFILE_CANDIDATES)

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Settings":
        """Load settings from environment and config file."""
        yaml_config = load_yaml_config(config_path)

        # Only use a YAML value if the env var is not set, env vars win
        overrides = {
            key: value
            for key, value in yaml_config.items()
            if key in cls.model_fields and not os.environ.get(f"{ENV_PREFIX}{key.upper()}")
        }

        return cls(**overrides)


def get_settings() -> Settings:
    """
    Load a fresh Settings instance.

    Nothing is cached: every operation sees the current environment.
    """
    return Settings.load()
