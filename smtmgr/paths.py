"""Platform path helpers for key-smtmgr."""

import os
import platform
from pathlib import Path

import click

from smtmgr import NAME


def get_config_dir() -> Path:
    """Return the configuration directory.

    Priority:
    1. SMTMGR_CONFIG_HOME environment variable (if set)
    2. The platform config directory (``~/.config/key-smtmgr`` on Linux)
    """
    if os.environ.get("SMTMGR_CONFIG_HOME"):
        return Path(os.environ["SMTMGR_CONFIG_HOME"])
    return Path(click.get_app_dir(NAME))


def get_config_path() -> Path:
    """Return path to the user configuration file."""
    return get_config_dir() / "config.json"


def get_data_dir() -> Path:
    """Return the platform data directory that installations live under.

    SMTMGR_DATA_HOME overrides the platform default.
    """
    if os.environ.get("SMTMGR_DATA_HOME"):
        return Path(os.environ["SMTMGR_DATA_HOME"])

    system = platform.system()
    if system == "Windows":
        local_app_data = os.environ.get("LOCALAPPDATA")
        if local_app_data:
            return Path(local_app_data)
        return Path.home() / "AppData" / "Local"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support"

    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


def get_key_settings_path() -> Path:
    """Return the default location of KeY's proof-independent settings."""
    return Path.home() / ".key" / "proofIndependentSettings.props"


def expand_path(value: str) -> str:
    """Expand ``$VAR``, ``${VAR}`` and ``~`` in a user-supplied path."""
    return os.path.expanduser(os.path.expandvars(value))


__all__ = [
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "get_key_settings_path",
    "expand_path",
]
