"""XDG locations of the budgetrule config file and database."""

import os
from pathlib import Path

APP_NAME = "budgetrule"

# Home-relative defaults used when the XDG variable is unset or empty
_XDG_FALLBACKS = {
    "XDG_CONFIG_HOME": (".config",),
    "XDG_DATA_HOME": (".local", "share"),
}


def xdg_home(variable: str) -> Path:
    """Get an XDG base directory, honouring the environment override."""
    override = os.environ.get(variable)
    if override:
        return Path(override)
    return Path.home().joinpath(*_XDG_FALLBACKS[variable])


def get_config_path() -> Path:
    return xdg_home("XDG_CONFIG_HOME") / APP_NAME / "config.toml"


def get_db_path() -> Path:
    return xdg_home("XDG_DATA_HOME") / APP_NAME / f"{APP_NAME}.db"
