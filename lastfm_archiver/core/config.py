"""
Configuration management for lastfm-archiver.

The API key, the username and the database path are always given on the
command line. Everything else lives in an optional config.yaml:
    - Base URL of the Last.fm-compatible API
    - Optional request timeout
    - Log file directory and console log level

Configuration File Location:
    --config <path> on the command line, otherwise config.yaml in the
    current working directory. When neither exists the defaults below
    are used.

Example config.yaml:
    api:
      base_url: "https://ws.audioscrobbler.com"
      timeout: null        # seconds, null = wait forever

    logging:
      directory: "~/.local/state/lastfm-archiver"
      level: "INFO"
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from lastfm_archiver.core.exceptions import ConfigError


# Default configuration file name (looked up in current working directory)
CONFIG_FILENAME = "config.yaml"

DEFAULT_BASE_URL = "https://ws.audioscrobbler.com"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ApiConfig:
    """
    Last.fm API settings.

    Attributes:
        base_url: Scheme and host of the API, without the /2.0/ path.
                  Any Last.fm-compatible service can be archived by
                  pointing this at it.
        timeout: Per-request timeout in seconds, or None to wait forever.
    """
    base_url: str = DEFAULT_BASE_URL
    timeout: float | None = None


@dataclass(frozen=True)
class LoggingConfig:
    """
    Logging settings.

    Attributes:
        directory: Directory for log files, or None for console output only.
        level: Console log level name.
    """
    directory: Path | None = None
    level: str = "INFO"


@dataclass(frozen=True)
class Config:
    """
    Complete application configuration.

    Created by load_config() and treated as immutable.

    Example:
        config = load_config()
        client = LastfmClient(api_key, base_url=config.api.base_url)
    """
    api: ApiConfig = field(default_factory=ApiConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(config_path: Path | None = None) -> Config:
    """
    Load and validate configuration from a YAML file.

    Args:
        config_path: Optional explicit path to config file.
                     If None, looks for config.yaml in the current working
                     directory and falls back to defaults when it is absent.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If an explicit config file is not found, the YAML is
                     invalid, or a section or value has the wrong type.
    """
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME
        if not config_path.exists():
            return Config()
    elif not config_path.exists():
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            details={"file_path": str(config_path)}
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except IOError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    # An empty file is a valid "use the defaults" config
    if raw_config is None:
        return Config()

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    return Config(
        api=_parse_api_config(_section(raw_config, "api")),
        logging=_parse_logging_config(_section(raw_config, "logging"))
    )


def _section(raw_config: dict[str, Any], name: str) -> dict[str, Any]:
    """Return a section of the raw config, {} if it is missing or null."""
    section = raw_config.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(
            f"Section '{name}' must be a dictionary",
            details={"section": name}
        )
    return section


def _parse_api_config(api_section: dict[str, Any]) -> ApiConfig:
    """
    Parse and validate the api section.

    Raises:
        ConfigError: If base_url is not an http(s) URL or timeout is not
                     a positive number.
    """
    base_url = api_section.get("base_url", DEFAULT_BASE_URL)
    if not isinstance(base_url, str) or not base_url.strip():
        raise ConfigError(
            "'api.base_url' must be a non-empty string",
            details={"field": "api.base_url"}
        )
    base_url = base_url.strip().rstrip("/")
    if not base_url.startswith(("http://", "https://")):
        raise ConfigError(
            f"'api.base_url' must start with http:// or https://: {base_url}",
            details={"field": "api.base_url", "value": base_url}
        )

    timeout = api_section.get("timeout")
    if timeout is not None:
        # bool is an int subclass, reject it explicitly
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigError(
                "'api.timeout' must be a positive number or null",
                details={"field": "api.timeout", "value": timeout}
            )
        timeout = float(timeout)

    return ApiConfig(base_url=base_url, timeout=timeout)


def _parse_logging_config(logging_section: dict[str, Any]) -> LoggingConfig:
    """
    Parse and validate the logging section.

    Expands ~ in the directory path. Does NOT create the directory
    (setup_logging does that).
    """
    directory = None
    raw_directory = logging_section.get("directory")
    if raw_directory is not None:
        if not isinstance(raw_directory, str) or not raw_directory.strip():
            raise ConfigError(
                "'logging.directory' must be a non-empty string or null",
                details={"field": "logging.directory"}
            )
        directory = Path(raw_directory.strip()).expanduser().resolve()

    level = logging_section.get("level", "INFO")
    if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
        raise ConfigError(
            f"'logging.level' must be one of {', '.join(LOG_LEVELS)}",
            details={"field": "logging.level", "value": level}
        )

    return LoggingConfig(directory=directory, level=level.upper())
