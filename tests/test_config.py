"""Tests for configuration loading and application paths."""

import json
from pathlib import Path

import pytest

from smtmgr.config import (
    DEFAULT_NIGHTLY_REPO_URL,
    DEFAULT_STABLE_REPO_URL,
    Config,
    config_to_dict,
    load_config,
    validate_config,
)
from smtmgr.context import AppContext
from smtmgr.errors import ConfigError
from smtmgr.paths import (
    expand_path,
    get_config_dir,
    get_config_path,
    get_data_dir,
    get_key_settings_path,
)


class TestValidateConfig:
    """Tests for validate_config."""

    def test_empty_object_gives_defaults(self):
        assert validate_config({}) == Config()

    def test_all_keys(self):
        config = validate_config(
            {
                "stableRepoUrl": "https://mirror.example.org/repo.json",
                "nightlyRepoUrl": "https://mirror.example.org/nightly.json",
                "nightlyChannel": True,
                "installationDirname": "solvers",
                "repositoryCache": "cache.json",
                "keySettingsPath": "/tmp/key.props",
            }
        )
        assert config.stable_repo_url == "https://mirror.example.org/repo.json"
        assert config.nightly_channel is True
        assert config.installation_dirname == "solvers"
        assert config.repository_cache == "cache.json"
        assert config.key_settings_path == "/tmp/key.props"

    def test_unknown_keys_are_ignored(self):
        config = validate_config({"futureOption": 1, "nightlyChannel": True})
        assert config.nightly_channel is True

    def test_wrong_type(self):
        with pytest.raises(ConfigError, match="nightlyChannel.*must be bool, got str"):
            validate_config({"nightlyChannel": "yes"})

    def test_not_an_object(self):
        with pytest.raises(ConfigError, match="JSON object"):
            validate_config(["stableRepoUrl"])

    def test_null_settings_path_allowed(self):
        assert validate_config({"keySettingsPath": None}).key_settings_path is None

    def test_repository_url_follows_channel(self):
        config = Config()
        assert config.repository_url == DEFAULT_STABLE_REPO_URL
        config.nightly_channel = True
        assert config.repository_url == DEFAULT_NIGHTLY_REPO_URL

    def test_dict_uses_json_keys(self):
        data = config_to_dict(Config())
        assert list(data) == [
            "stableRepoUrl",
            "nightlyRepoUrl",
            "nightlyChannel",
            "installationDirname",
            "repositoryCache",
            "keySettingsPath",
        ]


class TestLoadConfig:
    """Tests for load_config bootstrap and error reporting."""

    def test_bootstraps_missing_file(self, temp_dir, capsys):
        path = temp_dir / "config" / "config.json"
        config = load_config(path)

        assert config == Config()
        assert path.exists()
        assert json.loads(path.read_text())["stableRepoUrl"] == DEFAULT_STABLE_REPO_URL
        assert f"Created new configuration file at {path}" in capsys.readouterr().out

    def test_reads_existing_file(self, temp_dir, capsys):
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"nightlyChannel": True}))
        config = load_config(path)
        assert config.nightly_channel is True
        assert "Created" not in capsys.readouterr().out

    def test_syntax_error_points_at_position(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text('{\n  "nightlyChannel": tru\n}\n')
        with pytest.raises(ConfigError) as exc_info:
            load_config(path)

        message = str(exc_info.value)
        assert "line 2" in message
        assert '  "nightlyChannel": tru' in message
        assert message.splitlines()[-1].strip() == "^"

    def test_not_utf8(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_bytes(b'{"stableRepoUrl": "\xff"}')
        with pytest.raises(ConfigError, match="UTF-8"):
            load_config(path)


class TestPaths:
    """Tests for platform path helpers."""

    def test_config_dir_override(self, monkeypatch, temp_dir):
        monkeypatch.setenv("SMTMGR_CONFIG_HOME", str(temp_dir))
        assert get_config_dir() == temp_dir
        assert get_config_path() == temp_dir / "config.json"

    def test_config_dir_default(self, monkeypatch):
        monkeypatch.delenv("SMTMGR_CONFIG_HOME", raising=False)
        assert "key-smtmgr" in get_config_dir().name

    def test_data_dir_override(self, monkeypatch, temp_dir):
        monkeypatch.setenv("SMTMGR_DATA_HOME", str(temp_dir))
        assert get_data_dir() == temp_dir

    def test_data_dir_xdg(self, monkeypatch, temp_dir):
        monkeypatch.delenv("SMTMGR_DATA_HOME", raising=False)
        monkeypatch.setattr("smtmgr.paths.platform.system", lambda: "Linux")
        monkeypatch.setenv("XDG_DATA_HOME", str(temp_dir))
        assert get_data_dir() == temp_dir

    def test_data_dir_linux_default(self, monkeypatch):
        monkeypatch.delenv("SMTMGR_DATA_HOME", raising=False)
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        monkeypatch.setattr("smtmgr.paths.platform.system", lambda: "Linux")
        assert get_data_dir() == Path.home() / ".local" / "share"

    def test_data_dir_mac(self, monkeypatch):
        monkeypatch.delenv("SMTMGR_DATA_HOME", raising=False)
        monkeypatch.setattr("smtmgr.paths.platform.system", lambda: "Darwin")
        assert get_data_dir() == Path.home() / "Library" / "Application Support"

    def test_key_settings_default(self):
        assert get_key_settings_path() == Path.home() / ".key" / "proofIndependentSettings.props"

    def test_expand_path(self, monkeypatch):
        monkeypatch.setenv("SOLVER_ROOT", "/opt/solvers")
        assert expand_path("$SOLVER_ROOT/key") == "/opt/solvers/key"
        assert expand_path("${SOLVER_ROOT}") == "/opt/solvers"
        assert expand_path("~/x") == str(Path.home() / "x")


class TestAppContext:
    """Tests for derived application paths."""

    def test_derived_paths(self, app_context, temp_dir):
        install = temp_dir / "data" / "key-smtmgr"
        assert app_context.installation_path == install
        assert app_context.local_record_path == install / "info.json"
        assert app_context.repository_cache_path == temp_dir / "config" / "repository.cache.json"
        assert app_context.key_settings_path == temp_dir / "key" / "proofIndependentSettings.props"

    def test_default_key_settings_path(self, temp_dir):
        context = AppContext(Config(), temp_dir, temp_dir)
        assert context.key_settings_path == get_key_settings_path()

    def test_installation_dirname_expands_variables(self, monkeypatch, temp_dir):
        monkeypatch.setenv("SOLVER_DIR", "my-solvers")
        context = AppContext(Config(installation_dirname="$SOLVER_DIR"), temp_dir, temp_dir)
        assert context.installation_path == temp_dir / "my-solvers"

    def test_load_bootstraps_config(self, monkeypatch, temp_dir):
        monkeypatch.setenv("SMTMGR_CONFIG_HOME", str(temp_dir / "config"))
        monkeypatch.setenv("SMTMGR_DATA_HOME", str(temp_dir / "data"))

        context = AppContext.load()

        assert context.config == Config()
        assert context.config_dir == temp_dir / "config"
        assert context.data_dir == temp_dir / "data"
        assert (temp_dir / "config" / "config.json").exists()

    def test_load_explicit_path(self, temp_dir):
        path = temp_dir / "custom" / "settings.json"
        path.parent.mkdir()
        path.write_text(json.dumps({"repositoryCache": "other.json"}))
        context = AppContext.load(path)
        assert context.repository_cache_path == temp_dir / "custom" / "other.json"
