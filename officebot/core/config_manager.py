"""Configuration management for the officebot server."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_SERVER_PORT = 3000
DEFAULT_DATA_FILE = Path.home() / ".local" / "share" / "officebot" / "workspaces.json"


def parse_env_file(path: Path) -> dict[str, str]:
    """Parse a .env file and return key-value pairs.

    Args:
        path: Path to .env file

    Returns:
        Dictionary of key-value pairs from the .env file.
        Empty dict if file doesn't exist or cannot be read.

    Note:
        - Skips empty lines and comments (lines starting with #)
        - Strips quotes (both single and double) from values
        - Handles KEY=VALUE format with optional whitespace
    """
    if not path.exists():
        return {}

    result: dict[str, str] = {}

    try:
        content = path.read_text(encoding="utf-8")

        for raw_line in content.splitlines():
            line = raw_line.strip()

            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                continue

            key, val = line.split("=", 1)
            key = key.strip()
            val = val.strip().strip('"').strip("'")

            if key:
                result[key] = val

    except OSError:
        logger.debug(
            "Failed to read .env file (continuing): %s",
            str(path),
            exc_info=True,
        )

    return result


def load_yaml_defaults(path: Path) -> dict[str, Any]:
    """Load default workspace settings from a YAML file.

    The file may carry ``office_name``, ``office_address`` and a
    ``categories`` list; anything else is ignored by the store.

    Args:
        path: Path to YAML file

    Returns:
        Parsed mapping, or an empty dict when the file is missing or invalid
    """
    if not path.exists():
        logger.warning("Config file not found: %s", path)
        return {}

    try:
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config file %s: %s", path, e)
        return {}

    if not isinstance(data, dict):
        logger.warning("Config file %s must contain a mapping; ignoring", path)
        return {}

    return data


def _is_truthy(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class ConfigManager:
    """Manages application configuration from environment variables and .env files."""

    def __init__(self, env_file_path: Path | None = None):
        """Initialize configuration manager.

        Args:
            env_file_path: Optional path to .env file (defaults to .env in current directory)
        """
        self.env_file_path = env_file_path or Path.cwd() / ".env"

    def load_env_file(self) -> list[str]:
        """Load .env file and set environment variables.

        Only sets variables that are not already in the environment.

        Returns:
            List of environment variable keys that were loaded from .env file
        """
        if not self.env_file_path.exists():
            logger.debug("No .env file found at %s", self.env_file_path)
            return []

        parsed = parse_env_file(self.env_file_path)

        set_keys = []
        for key, val in parsed.items():
            if key not in os.environ:
                os.environ[key] = val
                set_keys.append(key)

        if set_keys:
            logger.debug("Loaded .env defaults for keys: %s", ", ".join(set_keys))

        return set_keys

    def build_config_from_env(self) -> dict[str, Any]:
        """Build configuration dictionary from environment variables.

        Recognizes:
        - SLACK_BOT_TOKEN -> 'slack_bot_token'
        - SLACK_SIGNING_SECRET -> 'slack_signing_secret'
        - OFFICEBOT_WEB_HOST -> 'server_bind'
        - OFFICEBOT_WEB_PORT (or PORT) -> 'server_port' (int)
        - OFFICEBOT_DATA_FILE -> 'data_file'
        - OFFICEBOT_WEATHER_LATITUDE / OFFICEBOT_WEATHER_LONGITUDE -> 'weather_location'
        - OFFICEBOT_FORECAST_URL -> 'forecast_url'
        - OFFICEBOT_QUOTES_ENABLED -> 'quotes_enabled' (bool)
        - OFFICEBOT_DEBUG -> 'debug_logging' (bool)
        - OFFICEBOT_CONFIG_FILE -> 'workspace_defaults' (parsed YAML)

        Returns:
            Configuration dictionary compatible with start_server
        """
        cfg: dict[str, Any] = {
            "server_bind": "0.0.0.0",  # nosec B104 - default bind; override via env
            "server_port": DEFAULT_SERVER_PORT,
            "data_file": str(DEFAULT_DATA_FILE),
            "quotes_enabled": True,
            "debug_logging": False,
        }

        token = os.environ.get("SLACK_BOT_TOKEN")
        if token:
            cfg["slack_bot_token"] = token

        secret = os.environ.get("SLACK_SIGNING_SECRET")
        if secret:
            cfg["slack_signing_secret"] = secret

        host = os.environ.get("OFFICEBOT_WEB_HOST")
        if host:
            cfg["server_bind"] = host

        port = os.environ.get("OFFICEBOT_WEB_PORT") or os.environ.get("PORT")
        if port:
            try:
                cfg["server_port"] = int(port)
            except ValueError:
                logger.warning("Invalid OFFICEBOT_WEB_PORT=%r; ignoring", port)

        data_file = os.environ.get("OFFICEBOT_DATA_FILE")
        if data_file:
            cfg["data_file"] = data_file

        lat = os.environ.get("OFFICEBOT_WEATHER_LATITUDE")
        lon = os.environ.get("OFFICEBOT_WEATHER_LONGITUDE")
        if lat and lon:
            try:
                cfg["weather_location"] = (float(lat), float(lon))
            except ValueError:
                logger.warning(
                    "Invalid weather coordinates lat=%r lon=%r; weather disabled", lat, lon
                )

        forecast_url = os.environ.get("OFFICEBOT_FORECAST_URL")
        if forecast_url:
            cfg["forecast_url"] = forecast_url

        quotes = os.environ.get("OFFICEBOT_QUOTES_ENABLED")
        if quotes:
            cfg["quotes_enabled"] = _is_truthy(quotes)

        debug = os.environ.get("OFFICEBOT_DEBUG")
        if debug:
            cfg["debug_logging"] = _is_truthy(debug)

        config_file = os.environ.get("OFFICEBOT_CONFIG_FILE")
        if config_file:
            cfg["workspace_defaults"] = load_yaml_defaults(Path(config_file))

        return cfg

    def load_full_config(self) -> dict[str, Any]:
        """Load .env file and build configuration from environment.

        Returns:
            Configuration dictionary
        """
        self.load_env_file()
        return self.build_config_from_env()


def get_config_value(config: Any, key: str, default: Any = None) -> Any:
    """Get configuration value supporting both dict and dataclass-like objects.

    Args:
        config: Configuration object (dict or object with attributes)
        key: Configuration key to retrieve
        default: Default value if key not found

    Returns:
        Configuration value or default
    """
    if isinstance(config, dict):
        return config.get(key, default)
    return getattr(config, key, default)
