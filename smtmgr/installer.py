"""Install, remove, enable and disable solver versions.

The local install record is the only state: a version counts as installed
once the record lists it. Side effects happen in this order so that a
crash leaves at worst an unregistered directory behind:

    download -> extract (or copy) -> record -> enable
"""

import logging
import os
import shutil
import stat
import tempfile
from pathlib import Path
from typing import Callable

from smtmgr import NAME
from smtmgr.archive import ExtractResult, ExtractStatus, extract_archive
from smtmgr.context import AppContext
from smtmgr.download import ProgressCallback, download_file
from smtmgr.errors import (
    AlreadyInstalled,
    ExtractionError,
    NoInstalledVersion,
    SettingsError,
    UnknownSolverVersion,
    UnsafePath,
    UnsupportedPlatform,
)
from smtmgr.models import InstalledSolverVersion, current_platform
from smtmgr.repository import RepositoryStore
from smtmgr.settings import KeySettings

_logging = logging.getLogger(__name__)

Downloader = Callable[[str, Path, ProgressCallback | None], Path]
Extractor = Callable[[Path, Path], ExtractResult]


def make_executable(path: Path) -> None:
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def _check_path_component(kind: str, value: str) -> None:
    """Reject names that are not a single directory name."""
    separators = {"/", "\\", os.sep, os.altsep} - {None}
    if value in ("", ".", "..") or any(sep in value for sep in separators):
        raise UnsafePath(f"invalid {kind} {value!r}: must be a plain directory name")


class Installer:
    def __init__(
        self,
        context: AppContext,
        store: RepositoryStore,
        settings: KeySettings,
        downloader: Downloader = download_file,
        extractor: Extractor = extract_archive,
    ):
        self.context = context
        self.store = store
        self.settings = settings
        self.downloader = downloader
        self.extractor = extractor

    def installation_path(self, solver: str, version: str) -> Path:
        """Directory of solver:version below the installation root.

        Raises:
            UnsafePath: If solver or version is not a plain directory name.
        """
        _check_path_component("solver name", solver)
        _check_path_component("version", version)
        return self.context.installation_path / solver / version

    def _removable_path(self, solver: str, version: str) -> Path:
        target = self.installation_path(solver, version)
        root = self.context.installation_path.resolve()
        resolved = target.resolve()
        if resolved == root or root not in resolved.parents:
            raise UnsafePath(f"{target} resolves to {resolved}, outside {root}")
        return target

    def executable_path(
        self, solver: str, installed: InstalledSolverVersion
    ) -> Path:
        path = self.installation_path(solver, installed.version) / installed.executable
        return Path(os.path.normpath(path.absolute()))

    def install(
        self,
        solver: str,
        version: str,
        enable: bool = False,
        progress: ProgressCallback | None = None,
    ) -> Path:
        """Download and unpack solver:version and record it as installed.

        Returns the installation directory.

        Raises:
            UnknownSolverVersion: The catalog has no such solver/version.
            AlreadyInstalled: The installation directory already exists.
            UnsupportedPlatform: No artifact for the running OS.
            NetworkError: The download failed.
            ExtractionError: Unpacking failed for a reason other than the
                artifact not being an archive.
        """
        remote = self.store.load_remote_cache()
        found = remote.find_solver_version(solver, version)
        if found is None:
            raise UnknownSolverVersion(solver, version)
        remote_solver, remote_version = found

        target = self.installation_path(solver, version)
        if target.exists():
            raise AlreadyInstalled(solver, version, target)

        slot = current_platform()
        url = remote_version.download_url(slot)
        if not url:
            raise UnsupportedPlatform(f"{solver}:{version} has no download for {slot}")

        _logging.info(f"Installing to {target}")
        temp_dir = Path(tempfile.mkdtemp(prefix=f"download_{NAME}"))
        try:
            artifact = self.downloader(url, temp_dir, progress)
            self._unpack(artifact, target)
        finally:
            shutil.rmtree(temp_dir, ignore_errors=True)

        executable = target / remote_version.executable
        if executable.is_file():
            make_executable(executable)
        else:
            _logging.warning(f"Executable {remote_version.executable} not found in {target}")

        local = self.store.load_local_record()
        local.install(remote_solver, remote_version)
        self.store.save_local_record(local)

        if enable:
            self.enable(solver, version)
        return target

    def _unpack(self, artifact: Path, target: Path) -> None:
        result = self.extractor(artifact, target)
        if result.status == ExtractStatus.EXTRACTED:
            return
        if result.status == ExtractStatus.NOT_AN_ARCHIVE:
            # a bare executable
            _logging.debug(f"{artifact.name} is not an archive, copying it as is")
            target.mkdir(parents=True, exist_ok=True)
            copied = Path(shutil.copy2(artifact, target / artifact.name))
            make_executable(copied)
            return
        raise ExtractionError(
            f"{result.message}. Remove the partial installation at {target} before retrying"
        )

    def remove(self, solver: str, version: str) -> bool:
        """Delete the installation and its record entry.

        Removing something that is not installed is a no-op. Returns True
        if the record changed.

        Raises:
            UnsafePath: If the installation directory would lie outside the
                installation root.
        """
        target = self._removable_path(solver, version)
        if target.exists():
            _logging.info(f"Deleting {target}")
            shutil.rmtree(target)

        local = self.store.load_local_record()
        changed = local.remove_solver_version(solver, version)
        if changed:
            self.store.save_local_record(local)

        try:
            self.disable(solver)
        except (OSError, SettingsError) as e:
            _logging.warning(f"Could not disable {solver} in KeY settings: {e}")
        return changed

    def enable(self, solver: str, version: str | None = None) -> Path:
        """Register the solver's executable in the KeY settings.

        Without a version the latest installed one is used. Returns the
        registered executable path.

        Raises:
            NoInstalledVersion: Nothing suitable is installed.
        """
        local = self.store.load_local_record()
        found = local.get_solver_version(solver, version)
        if found is None:
            raise NoInstalledVersion(solver, version)
        _, installed = found

        executable = self.executable_path(solver, installed)
        self.settings.set_solver_command(solver, str(executable))
        _logging.info(f"Enabled {solver}:{installed.version} -> {executable}")
        return executable

    def disable(self, solver: str, version: str | None = None) -> bool:
        """Clear the solver's registration in the KeY settings.

        With a version only a registration pointing into that version's
        installation is cleared. Returns True if the settings changed.
        """
        current = self.settings.get_solver_command(solver)
        if current is None:
            return False
        if version is not None:
            base = Path(os.path.normpath(self.installation_path(solver, version).absolute()))
            if base not in Path(current).parents:
                return False
        return self.settings.clear_solver_command(solver)

    def enabled_command(self, solver: str) -> str | None:
        return self.settings.get_solver_command(solver)


__all__ = [
    "make_executable",
    "Installer",
]
