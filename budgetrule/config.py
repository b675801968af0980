"""Configuration file management for budgetrule.

Settings come from a TOML file merged over ``DEFAULT_CONFIG``. Values are
checked when loaded so a typo in the file is reported once, up front.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

import tomli_w

from budgetrule.paths import get_config_path, get_db_path

DEFAULT_CONFIG: dict[str, Any] = {
    "namespace": "budget",
    "log_level": "WARNING",
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(ValueError):
    """The config file is not valid TOML or holds an invalid value."""


def write_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Write settings to the config file, readable by the owner only."""
    config_path = config_path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def create_default_config(config_path: Path | None = None) -> None:
    write_config(DEFAULT_CONFIG, config_path)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Read the raw TOML table.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ConfigError: If the file is not valid TOML.
    """
    config_path = config_path or get_config_path()

    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{config_path} is not valid TOML: {e}") from e


def parse_log_level(value: Any) -> str:
    """Normalize a log level name, e.g. "info" -> "INFO"."""
    level = str(value).upper()
    if level not in LOG_LEVELS:
        raise ConfigError(f"Unknown log_level {value!r} (choose from {', '.join(LOG_LEVELS)})")
    return level


def load_settings(config_path: Path | None = None) -> dict[str, Any]:
    """Load and check configuration merged over the defaults.

    A missing config file is not an error; the defaults are returned.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary with every known key present.

    Raises:
        ConfigError: If the file cannot be parsed or a value is invalid.
    """
    settings = dict(DEFAULT_CONFIG)
    try:
        settings.update(load_config(config_path))
    except FileNotFoundError:
        return settings

    settings["log_level"] = parse_log_level(settings["log_level"])

    namespace = settings["namespace"]
    if not isinstance(namespace, str) or not namespace:
        raise ConfigError(f"namespace must be a non-empty string, got {namespace!r}")

    if "db_path" in settings and not isinstance(settings["db_path"], str):
        raise ConfigError(f"db_path must be a string, got {settings['db_path']!r}")

    return settings


def resolve_db_path(settings: dict[str, Any]) -> Path:
    """Get the database path, honouring a ``db_path`` override."""
    override = settings.get("db_path")
    if override:
        return Path(override).expanduser()
    return get_db_path()
