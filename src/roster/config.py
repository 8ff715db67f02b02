"""Configuration loading for the roster client."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

CONFIG_FILENAME = "roster.yaml"

DEFAULT_BASE_URL = "http://localhost:8080"
DEFAULT_SESSION_FILE = "~/.roster/session.json"
DEFAULT_LOGIN_DESTINATION = "/login"


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""


@dataclass
class ApiConfig:
    """Remote API settings.

    ``timeout`` of None keeps the HTTP transport's default.
    """

    base_url: str = DEFAULT_BASE_URL
    timeout: float | None = None

    @property
    def students_url(self) -> str:
        return f"{self.base_url}/api/students"

    @property
    def auth_url(self) -> str:
        return f"{self.base_url}/api/auth"


@dataclass
class LoggingConfig:
    """Log file settings."""

    dir: str = "logs"
    level: str = "INFO"


@dataclass
class RosterConfig:
    """Roster client configuration."""

    api: ApiConfig = field(default_factory=ApiConfig)
    session_file: Path = field(default_factory=lambda: Path(DEFAULT_SESSION_FILE).expanduser())
    login_destination: str = DEFAULT_LOGIN_DESTINATION
    discard_stale_responses: bool = False
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RosterConfig:
        """Create config from a dictionary (usually parsed YAML).

        Raises:
            ConfigError: If a section has the wrong shape or a value the wrong type.
        """
        api_data = _section(data, "api")
        session_data = _section(data, "session")
        logging_data = _section(data, "logging")

        api = ApiConfig(
            base_url=str(api_data.get("base_url", DEFAULT_BASE_URL)).rstrip("/"),
            timeout=_parse_timeout(api_data.get("timeout")),
        )
        session_file = _string(session_data, "file", DEFAULT_SESSION_FILE, "session.file")
        return cls(
            api=api,
            session_file=Path(session_file).expanduser(),
            login_destination=_string(
                data, "login_destination", DEFAULT_LOGIN_DESTINATION, "login_destination"
            ),
            discard_stale_responses=_flag(data, "discard_stale_responses"),
            logging=LoggingConfig(
                dir=_string(logging_data, "dir", "logs", "logging.dir"),
                level=_string(logging_data, "level", "INFO", "logging.level"),
            ),
        )

    def apply_env(self, environ: dict[str, str] | None = None) -> RosterConfig:
        """Override values from ROSTER_* environment variables in place."""
        env = os.environ if environ is None else environ
        if env.get("ROSTER_API_URL"):
            self.api.base_url = env["ROSTER_API_URL"].rstrip("/")
        if env.get("ROSTER_API_TIMEOUT"):
            self.api.timeout = _parse_timeout(env["ROSTER_API_TIMEOUT"])
        if env.get("ROSTER_SESSION_FILE"):
            self.session_file = Path(env["ROSTER_SESSION_FILE"]).expanduser()
        if env.get("ROSTER_LOG_DIR"):
            self.logging.dir = env["ROSTER_LOG_DIR"]
        if env.get("ROSTER_LOG_LEVEL"):
            self.logging.level = env["ROSTER_LOG_LEVEL"]
        return self


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{name}' must be a mapping, got {type(value).__name__}")
    return value


def _string(data: dict[str, Any], key: str, default: str, name: str) -> str:
    value = data.get(key, default)
    if not isinstance(value, str) or not value:
        raise ConfigError(f"'{name}' must be a non-empty string, got {value!r}")
    return value


def _flag(data: dict[str, Any], key: str) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        raise ConfigError(f"'{key}' must be true or false, got {value!r}")
    return value


def _parse_timeout(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid API timeout: {value!r}") from e


def load_config(config_path: Path | str) -> RosterConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to roster.yaml.

    Returns:
        Parsed configuration object.

    Raises:
        ConfigError: If the file doesn't exist or is invalid.
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

    return RosterConfig.from_dict(data)


def find_config(start_path: Path | str | None = None) -> Path | None:
    """Find roster.yaml by walking up the directory tree.

    Returns:
        Path to the file, or None when no directory up to the root has one.
    """
    current = Path.cwd() if start_path is None else Path(start_path)
    current = current.resolve()

    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.exists():
            return candidate
    return None


def resolve_config(config_path: Path | str | None = None) -> RosterConfig:
    """Load the explicit or discovered config file, then apply env overrides."""
    if config_path is None:
        config_path = find_config()
    config = load_config(config_path) if config_path is not None else RosterConfig()
    return config.apply_env()
