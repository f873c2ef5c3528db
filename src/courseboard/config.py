"""Configuration loading for Courseboard.

Settings come from an optional ``courseboard.yaml`` file and are then
overridden by ``COURSEBOARD_*`` environment variables.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

DEFAULT_CONFIG_FILE = "courseboard.yaml"
ENV_PREFIX = "COURSEBOARD_"


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""


@dataclass
class Settings:
    """Service settings.

    Attributes:
        db_path: SQLite database file, or ":memory:".
        log_dir: Directory for rotating log files.
        log_level: DEBUG, INFO, WARNING or ERROR.
        host: Interface the API server binds to.
        port: Port the API server listens on.
        cors_origins: Origins allowed to call the API from a browser.
    """

    db_path: str = "courseboard.db"
    log_dir: str = "logs"
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Settings:
        """Create settings from a dictionary.

        Args:
            data: Settings mapping, typically parsed from YAML.

        Returns:
            Parsed settings.

        Raises:
            ConfigError: If a key is unknown or a value has the wrong type.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown settings: {', '.join(unknown)}")

        settings = cls()
        for key, value in data.items():
            setattr(settings, key, _coerce(key, value))
        return settings

    def apply_env(self, environ: Mapping[str, str] | None = None) -> Settings:
        """Override settings from COURSEBOARD_* environment variables.

        Args:
            environ: Environment mapping. Defaults to os.environ.

        Returns:
            This settings object, updated in place.
        """
        environ = os.environ if environ is None else environ
        for f in fields(self):
            value = environ.get(f"{ENV_PREFIX}{f.name.upper()}")
            if value is not None:
                setattr(self, f.name, _coerce(f.name, value))
        return self


def _coerce(key: str, value: Any) -> Any:
    if key == "port":
        try:
            port = int(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"port must be an integer, got {value!r}") from e
        if not 0 < port < 65536:
            raise ConfigError(f"port out of range: {port}")
        return port
    if key == "cors_origins":
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        if isinstance(value, list) and all(isinstance(v, str) for v in value):
            return list(value)
        raise ConfigError(f"cors_origins must be a list of strings, got {value!r}")
    if not isinstance(value, str):
        raise ConfigError(f"{key} must be a string, got {type(value).__name__}")
    return value


def load_config(config_path: Path | str) -> Settings:
    """Load settings from a YAML file.

    Args:
        config_path: Path to courseboard.yaml file.

    Returns:
        Parsed settings (without environment overrides).

    Raises:
        ConfigError: If file doesn't exist or is invalid.
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration must be a YAML mapping, got {type(data).__name__}")

    return Settings.from_dict(data)


def load_settings(
    config_path: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Load settings from file (if any) and the environment.

    Args:
        config_path: Explicit config file. When omitted, courseboard.yaml in
            the current directory is used if it exists.
        environ: Environment mapping. Defaults to os.environ.

    Returns:
        Effective settings.

    Raises:
        ConfigError: If an explicit file is missing or any file is invalid.
    """
    if config_path is not None:
        settings = load_config(config_path)
    elif Path(DEFAULT_CONFIG_FILE).exists():
        settings = load_config(DEFAULT_CONFIG_FILE)
    else:
        settings = Settings()
    return settings.apply_env(environ)
