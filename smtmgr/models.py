"""Catalog and installation record data model.

Two documents describe the world:

- the *remote repository* (catalog): every solver and version that can be
  downloaded, with per-OS artifact URLs;
- the *local repository* (install record): what has been installed on this
  machine, as a snapshot of the catalog metadata taken at install time.

Solvers and versions are kept in insertion-ordered dicts keyed by solver
name and version string. The JSON documents store them as lists; when a
list repeats a key the first entry wins.
"""

import logging
import platform
from dataclasses import dataclass, field
from typing import Any

from smtmgr import FORMAT_VERSION
from smtmgr.errors import SchemaMismatchError
from smtmgr.versions import max_version

_logging = logging.getLogger(__name__)


def _require(data: dict, key: str, types: tuple, where: str) -> Any:
    if key not in data:
        raise SchemaMismatchError(f"{where}.{key} is required")
    return _check(data[key], types, f"{where}.{key}")


def _optional(data: dict, key: str, types: tuple, where: str, default: Any = None) -> Any:
    value = data.get(key)
    if value is None:
        return default
    return _check(value, types, f"{where}.{key}")


def _check(value: Any, types: tuple, where: str) -> Any:
    # bool is an int subclass; never accept it for integer fields
    if not isinstance(value, types) or (isinstance(value, bool) and bool not in types):
        names = " or ".join(t.__name__ for t in types)
        raise SchemaMismatchError(
            f"{where} must be {names}, got {type(value).__name__}"
        )
    return value


def _object(value: Any, where: str) -> dict:
    if not isinstance(value, dict):
        raise SchemaMismatchError(f"{where} must be an object, got {type(value).__name__}")
    return value


def _keyed(items: list, key, where: str) -> dict:
    """Index a parsed list by key, keeping the first entry for duplicates."""
    result = {}
    for item in items:
        k = key(item)
        if k in result:
            _logging.debug(f"{where}: duplicate entry {k!r} ignored")
            continue
        result[k] = item
    return result


def current_platform() -> str:
    """Map the running OS to a download slot: 'win', 'mac' or 'linux'."""
    system = platform.system()
    if system.startswith("Windows"):
        return "win"
    if system == "Darwin" or system.startswith("Mac"):
        return "mac"
    return "linux"


@dataclass
class DownloadUrls:
    linux: str | None = None
    win: str | None = None
    mac: str | None = None

    @classmethod
    def from_dict(cls, data: Any, where: str) -> "DownloadUrls":
        data = _object(data, where)
        return cls(
            linux=_optional(data, "linux", (str,), where),
            win=_optional(data, "win", (str,), where),
            mac=_optional(data, "mac", (str,), where),
        )

    def to_dict(self) -> dict:
        return {"linux": self.linux, "win": self.win, "mac": self.mac}


@dataclass
class RemoteSolverVersion:
    version: str
    release_date: str
    download: DownloadUrls
    executable: str
    description: str = ""

    def download_url(self, slot: str | None = None) -> str | None:
        """Artifact URL for the given slot, defaulting to the running OS."""
        return getattr(self.download, slot or current_platform())

    @classmethod
    def from_dict(cls, data: Any, where: str) -> "RemoteSolverVersion":
        data = _object(data, where)
        return cls(
            version=_require(data, "version", (str,), where),
            description=_optional(data, "description", (str,), where, ""),
            release_date=_optional(data, "releaseDate", (str,), where, ""),
            download=DownloadUrls.from_dict(
                _require(data, "download", (dict,), where), f"{where}.download"
            ),
            executable=_require(data, "executable", (str,), where),
        )

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "description": self.description,
            "releaseDate": self.release_date,
            "download": self.download.to_dict(),
            "executable": self.executable,
        }


@dataclass
class RemoteSolver:
    name: str
    license: str = ""
    homepage: str = ""
    description: str = ""
    versions: dict[str, RemoteSolverVersion] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any, where: str) -> "RemoteSolver":
        data = _object(data, where)
        raw_versions = _optional(data, "versions", (list,), where, [])
        versions = [
            RemoteSolverVersion.from_dict(v, f"{where}.versions[{i}]")
            for i, v in enumerate(raw_versions)
        ]
        return cls(
            name=_require(data, "name", (str,), where),
            license=_optional(data, "license", (str,), where, ""),
            homepage=_optional(data, "homepage", (str,), where, ""),
            description=_optional(data, "description", (str,), where, ""),
            versions=_keyed(versions, lambda v: v.version, f"{where}.versions"),
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "license": self.license,
            "homepage": self.homepage,
            "description": self.description,
            "versions": [v.to_dict() for v in self.versions.values()],
        }


@dataclass
class InstalledSolverVersion:
    version: str
    release_date: str
    executable: str
    description: str = ""

    @classmethod
    def from_remote(cls, remote: RemoteSolverVersion) -> "InstalledSolverVersion":
        return cls(
            version=remote.version,
            description=remote.description,
            release_date=remote.release_date,
            executable=remote.executable,
        )

    @classmethod
    def from_dict(cls, data: Any, where: str) -> "InstalledSolverVersion":
        data = _object(data, where)
        return cls(
            version=_require(data, "version", (str,), where),
            description=_optional(data, "description", (str,), where, ""),
            release_date=_optional(data, "releaseDate", (str,), where, ""),
            executable=_require(data, "executable", (str,), where),
        )

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "description": self.description,
            "releaseDate": self.release_date,
            "executable": self.executable,
        }


@dataclass
class LocalSolver:
    name: str
    license: str = ""
    homepage: str = ""
    description: str = ""
    versions: dict[str, InstalledSolverVersion] = field(default_factory=dict)

    @classmethod
    def from_remote(cls, remote: RemoteSolver) -> "LocalSolver":
        return cls(
            name=remote.name,
            license=remote.license,
            homepage=remote.homepage,
            description=remote.description,
        )

    @classmethod
    def from_dict(cls, data: Any, where: str) -> "LocalSolver":
        data = _object(data, where)
        raw_versions = _optional(data, "versions", (list,), where, [])
        versions = [
            InstalledSolverVersion.from_dict(v, f"{where}.versions[{i}]")
            for i, v in enumerate(raw_versions)
        ]
        return cls(
            name=_require(data, "name", (str,), where),
            license=_optional(data, "license", (str,), where, ""),
            homepage=_optional(data, "homepage", (str,), where, ""),
            description=_optional(data, "description", (str,), where, ""),
            versions=_keyed(versions, lambda v: v.version, f"{where}.versions"),
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "license": self.license,
            "homepage": self.homepage,
            "description": self.description,
            "versions": [v.to_dict() for v in self.versions.values()],
        }


def _latest_versions(solvers) -> dict[str, str]:
    result = {}
    for solver in solvers:
        if not solver.versions:
            _logging.debug(f"{solver.name} has no versions, skipped")
            continue
        result[solver.name] = max_version(solver.versions)
    return result


@dataclass
class RemoteRepository:
    """Catalog snapshot. Read-only from the manager's point of view."""
    format_version: int
    updated: str = ""
    latest_tool_version: str | None = None
    latest_tool_download_url: str | None = None
    solvers: dict[str, RemoteSolver] = field(default_factory=dict)

    @property
    def requires_self_update(self) -> bool:
        return self.format_version > FORMAT_VERSION

    @classmethod
    def from_dict(cls, data: Any) -> "RemoteRepository":
        data = _object(data, "repository")
        raw_solvers = _require(data, "solvers", (list,), "repository")
        solvers = [
            RemoteSolver.from_dict(s, f"solvers[{i}]") for i, s in enumerate(raw_solvers)
        ]
        return cls(
            format_version=_require(data, "formatVersion", (int,), "repository"),
            updated=_optional(data, "updated", (str,), "repository", ""),
            latest_tool_version=_optional(data, "latestVersion", (str,), "repository"),
            latest_tool_download_url=_optional(data, "latestDownload", (str,), "repository"),
            solvers=_keyed(solvers, lambda s: s.name, "solvers"),
        )

    def to_dict(self) -> dict:
        return {
            "updated": self.updated,
            "formatVersion": self.format_version,
            "latestVersion": self.latest_tool_version,
            "latestDownload": self.latest_tool_download_url,
            "solvers": [s.to_dict() for s in self.solvers.values()],
        }

    def find_latest_versions(self) -> dict[str, str]:
        """Highest version per solver; solvers without versions are left out."""
        return _latest_versions(self.solvers.values())

    def get_solver(self, name: str) -> RemoteSolver | None:
        return self.solvers.get(name)

    def find_solver_version(
        self, solver: str, version: str
    ) -> tuple[RemoteSolver, RemoteSolverVersion] | None:
        s = self.solvers.get(solver)
        if s is None:
            return None
        v = s.versions.get(version)
        if v is None:
            return None
        return s, v


@dataclass
class LocalRepository:
    """Durable record of the solver versions installed on this machine."""
    format_version: int = FORMAT_VERSION
    installed: dict[str, LocalSolver] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "LocalRepository":
        data = _object(data, "record")
        raw_installed = _optional(data, "installed", (list,), "record", [])
        installed = [
            LocalSolver.from_dict(s, f"installed[{i}]") for i, s in enumerate(raw_installed)
        ]
        return cls(
            format_version=_require(data, "formatVersion", (int,), "record"),
            installed=_keyed(installed, lambda s: s.name, "installed"),
        )

    def to_dict(self) -> dict:
        return {
            "formatVersion": self.format_version,
            "installed": [s.to_dict() for s in self.installed.values()],
        }

    def find_latest_versions(self) -> dict[str, str]:
        """Highest installed version per solver."""
        return _latest_versions(self.installed.values())

    def get_solver(self, name: str) -> LocalSolver | None:
        return self.installed.get(name)

    def is_installed(self, solver: str, version: str) -> bool:
        s = self.installed.get(solver)
        return s is not None and version in s.versions

    def get_solver_version(
        self, solver: str, version: str | None = None
    ) -> tuple[LocalSolver, InstalledSolverVersion] | None:
        """Look up an installed version; None means the latest installed one."""
        s = self.installed.get(solver)
        if s is None or not s.versions:
            return None
        if version is None:
            version = max_version(s.versions)
        v = s.versions.get(version)
        if v is None:
            return None
        return s, v

    def install(
        self, solver: RemoteSolver, version: RemoteSolverVersion
    ) -> InstalledSolverVersion:
        """Record solver/version as installed. Repeated calls are no-ops."""
        local = self.installed.get(solver.name)
        if local is None:
            local = LocalSolver.from_remote(solver)
            self.installed[solver.name] = local
        installed = local.versions.get(version.version)
        if installed is None:
            installed = InstalledSolverVersion.from_remote(version)
            local.versions[version.version] = installed
        return installed

    def remove_solver_version(self, solver: str, version: str) -> bool:
        """Drop a version; a solver left without versions is dropped too.

        Returns True if the record changed.
        """
        local = self.installed.get(solver)
        if local is None or version not in local.versions:
            return False
        del local.versions[version]
        if not local.versions:
            del self.installed[solver]
        return True


__all__ = [
    "current_platform",
    "DownloadUrls",
    "RemoteSolverVersion",
    "RemoteSolver",
    "RemoteRepository",
    "InstalledSolverVersion",
    "LocalSolver",
    "LocalRepository",
]
