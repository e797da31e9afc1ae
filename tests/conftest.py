"""Pytest fixtures and utilities for key-smtmgr tests."""

import copy
import json
import tempfile
import zipfile
from pathlib import Path
from typing import Generator

import pytest


Z3_SCRIPT = b"#!/bin/sh\necho 'Z3 version 4.12.1'\n"


def _version(version: str, release_date: str, executable: str, stem: str) -> dict:
    return {
        "version": version,
        "description": f"Release {version}",
        "releaseDate": release_date,
        "download": {
            "linux": f"https://example.org/{stem}-{version}-x64-glibc.zip",
            "win": f"https://example.org/{stem}-{version}-x64-win.zip",
            "mac": f"https://example.org/{stem}-{version}-x64-osx.zip",
        },
        "executable": executable,
    }


CATALOG = {
    "updated": "2023-01-17T10:00:00Z",
    "formatVersion": 1,
    "latestVersion": "1.0.0",
    "latestDownload": "https://example.org/key-smtmgr-1.0.0.zip",
    "solvers": [
        {
            "name": "z3",
            "license": "MIT",
            "homepage": "https://github.com/Z3Prover/z3",
            "description": "Z3 is a theorem prover from Microsoft Research.",
            "versions": [
                _version("4.11.0", "2022-08-09", "bin/z3", "z3"),
                _version("4.12.1", "2023-01-18", "bin/z3", "z3"),
            ],
        },
        {
            "name": "cvc5",
            "license": "BSD-3-Clause",
            "homepage": "https://cvc5.github.io",
            "description": "An efficient open-source SMT solver.",
            "versions": [_version("1.0.5", "2023-02-22", "cvc5", "cvc5")],
        },
        {
            "name": "mathsat",
            "license": "proprietary",
            "homepage": "https://mathsat.fbk.eu",
            "description": "",
            "versions": [],
        },
    ],
}


def write_zip(path: Path, members: dict[str, bytes], mode: int = 0o755) -> Path:
    """Write a zip archive whose file members carry the given unix mode."""
    with zipfile.ZipFile(path, "w") as zf:
        for name, data in members.items():
            info = zipfile.ZipInfo(name)
            info.external_attr = (0o100000 | mode) << 16
            zf.writestr(info, data)
    return path


class FakeDownloader:
    """Stand-in for download_file that produces a local artifact.

    By default every download is a zip containing ``bin/z3``.
    """

    def __init__(self, artifact=None):
        self.artifact = artifact
        self.calls = []

    def __call__(self, url, target_dir, progress=None):
        self.calls.append((url, target_dir))
        if self.artifact is not None:
            name, data = self.artifact
            path = target_dir / name
            path.write_bytes(data)
        else:
            path = write_zip(target_dir / url.rsplit("/", 1)[-1], {"bin/z3": Z3_SCRIPT})
        if progress:
            progress(path.stat().st_size, path.stat().st_size)
        return path


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def catalog_data() -> dict:
    """A fresh copy of the sample catalog document."""
    return copy.deepcopy(CATALOG)


@pytest.fixture
def app_context(temp_dir: Path, monkeypatch):
    """AppContext rooted in a temporary directory."""
    from smtmgr.config import Config
    from smtmgr.context import AppContext

    config_dir = temp_dir / "config"
    data_dir = temp_dir / "data"
    monkeypatch.setenv("SMTMGR_CONFIG_HOME", str(config_dir))
    monkeypatch.setenv("SMTMGR_DATA_HOME", str(data_dir))
    config = Config(key_settings_path=str(temp_dir / "key" / "proofIndependentSettings.props"))
    return AppContext(config=config, config_dir=config_dir, data_dir=data_dir)


@pytest.fixture
def fetch(catalog_data):
    """Fake catalog fetch that records requested URLs."""

    def _fetch(url):
        _fetch.calls.append(url)
        return json.dumps(catalog_data, indent=2)

    _fetch.calls = []
    return _fetch


@pytest.fixture
def store(app_context, fetch):
    from smtmgr.repository import RepositoryStore

    return RepositoryStore(app_context, fetch=fetch)


@pytest.fixture
def downloader() -> FakeDownloader:
    return FakeDownloader()


@pytest.fixture
def key_settings(app_context):
    from smtmgr.settings import KeySettings

    return KeySettings(app_context.key_settings_path)


@pytest.fixture
def installer(app_context, store, key_settings, downloader):
    from smtmgr.installer import Installer

    return Installer(app_context, store, key_settings, downloader=downloader)
