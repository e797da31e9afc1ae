"""Per-invocation application context.

The context is built once by the CLI entry point and handed to every
component that needs configuration or file locations. Tests build their
own against a temporary directory.
"""

from dataclasses import dataclass
from pathlib import Path

from smtmgr.config import Config, load_config
from smtmgr.paths import (
    expand_path,
    get_config_dir,
    get_config_path,
    get_data_dir,
    get_key_settings_path,
)


@dataclass
class AppContext:
    config: Config
    config_dir: Path
    data_dir: Path

    @classmethod
    def load(cls, config_path: Path | None = None) -> "AppContext":
        """Build the context from the user's configuration file."""
        path = config_path or get_config_path()
        return cls(
            config=load_config(path),
            config_dir=path.parent if config_path else get_config_dir(),
            data_dir=get_data_dir(),
        )

    @property
    def installation_path(self) -> Path:
        """Root directory that holds ``<solver>/<version>`` trees."""
        return self.data_dir / expand_path(self.config.installation_dirname)

    @property
    def local_record_path(self) -> Path:
        return self.installation_path / "info.json"

    @property
    def repository_cache_path(self) -> Path:
        return self.config_dir / self.config.repository_cache

    @property
    def key_settings_path(self) -> Path:
        if self.config.key_settings_path:
            return Path(expand_path(self.config.key_settings_path))
        return get_key_settings_path()


__all__ = ["AppContext"]
