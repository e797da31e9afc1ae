"""Configuration loading with bootstrap-on-first-use."""

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path

import click

from smtmgr.errors import ConfigError, format_field_error

_logging = logging.getLogger(__name__)

DEFAULT_STABLE_REPO_URL = (
    "https://raw.githubusercontent.com/wadoon/key-smtmgr/main/repo.json"
)
DEFAULT_NIGHTLY_REPO_URL = (
    "https://raw.githubusercontent.com/wadoon/key-smtmgr/nightly/repo.json"
)


@dataclass
class Config:
    """User configuration stored in ``config.json``."""
    stable_repo_url: str = DEFAULT_STABLE_REPO_URL
    nightly_repo_url: str = DEFAULT_NIGHTLY_REPO_URL
    nightly_channel: bool = False
    installation_dirname: str = "key-smtmgr"
    repository_cache: str = "repository.cache.json"
    key_settings_path: str | None = None

    @property
    def repository_url(self) -> str:
        """Catalog URL of the active channel."""
        if self.nightly_channel:
            return self.nightly_repo_url
        return self.stable_repo_url


# JSON key -> (dataclass field, accepted types)
_KEYS = {
    "stableRepoUrl": ("stable_repo_url", (str,)),
    "nightlyRepoUrl": ("nightly_repo_url", (str,)),
    "nightlyChannel": ("nightly_channel", (bool,)),
    "installationDirname": ("installation_dirname", (str,)),
    "repositoryCache": ("repository_cache", (str,)),
    "keySettingsPath": ("key_settings_path", (str, type(None))),
}


def validate_config(data: dict) -> Config:
    """Validate and convert the raw JSON object to a Config.

    Unknown keys are ignored so newer configuration files keep working.

    Raises:
        ConfigError: If a known key has the wrong type.
    """
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a JSON object, got {type(data).__name__}")

    values = {}
    for key, (attr, types) in _KEYS.items():
        if key not in data:
            continue
        value = data[key]
        if not isinstance(value, types):
            expected = " or ".join(
                "null" if t is type(None) else t.__name__ for t in types
            )
            raise ConfigError(
                format_field_error("Config", key, f"must be {expected}, got {type(value).__name__}")
            )
        values[attr] = value

    unknown = set(data) - set(_KEYS)
    if unknown:
        _logging.debug(f"Ignoring unknown config keys: {', '.join(sorted(unknown))}")

    return Config(**values)


def config_to_dict(config: Config) -> dict:
    attrs = {attr: key for key, (attr, _) in _KEYS.items()}
    return {attrs[f.name]: getattr(config, f.name) for f in fields(config)}


def format_syntax_error(text: str, error: json.JSONDecodeError, what: str) -> str:
    """Describe a JSON syntax error with the offending line and a caret."""
    lines = text.split("\n")
    parts = [f"{what} syntax error at line {error.lineno}, col {error.colno}: {error.msg}"]
    if 1 <= error.lineno <= len(lines):
        parts.append(lines[error.lineno - 1])
        parts.append(" " * (error.colno - 1) + "^")
    return "\n".join(parts)


def load_config(path: Path) -> Config:
    """Load the configuration, creating it with defaults if absent.

    Raises:
        ConfigError: If the file cannot be read or contains invalid JSON.
    """
    if not path.exists():
        config = Config()
        save_config(config, path)
        click.echo(f"Created new configuration file at {path}")
        return config

    try:
        text = path.read_text(encoding="utf-8")
    except PermissionError:
        raise ConfigError(f"Permission denied reading config file: {path}")
    except UnicodeDecodeError:
        raise ConfigError(f"Config file is not valid UTF-8: {path}")
    except OSError as e:
        raise ConfigError(f"Error reading config file {path}: {e}")

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(format_syntax_error(text, e, "Config")) from e

    return validate_config(data)


def save_config(config: Config, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config_to_dict(config), f, indent=2)
        f.write("\n")


__all__ = [
    "Config",
    "DEFAULT_STABLE_REPO_URL",
    "DEFAULT_NIGHTLY_REPO_URL",
    "validate_config",
    "config_to_dict",
    "format_syntax_error",
    "load_config",
    "save_config",
]
