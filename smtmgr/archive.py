"""Archive extraction with a typed result.

extract_archive() never raises for the expected failure modes; callers
branch on ExtractResult.status instead.
"""

import logging
import os
import shutil
import tarfile
import zipfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

_logging = logging.getLogger(__name__)


class ExtractStatus(Enum):
    EXTRACTED = "extracted"
    NOT_AN_ARCHIVE = "not-an-archive"
    FAILED = "failed"


@dataclass(frozen=True)
class ExtractResult:
    status: ExtractStatus
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status == ExtractStatus.EXTRACTED


class _UnsafeMember(Exception):
    pass


def _safe_target(dest: Path, name: str) -> Path:
    if not name or name.startswith("/") or os.path.isabs(name):
        raise _UnsafeMember(f"Archive contains an absolute path entry: {name!r}")
    base = dest.resolve()
    target = (dest / name).resolve()
    if target != base and base not in target.parents:
        raise _UnsafeMember(f"Archive contains an invalid path entry: {name!r}")
    return target


def _extract_zip(archive: Path, dest: Path) -> None:
    with zipfile.ZipFile(archive, "r") as zf:
        for info in zf.infolist():
            target = _safe_target(dest, info.filename)
            if info.is_dir():
                target.mkdir(parents=True, exist_ok=True)
                continue

            target.parent.mkdir(parents=True, exist_ok=True)
            with zf.open(info, "r") as src, open(target, "wb") as out:
                shutil.copyfileobj(src, out)

            # zip keeps unix permissions in the high bits of external_attr
            mode = (info.external_attr >> 16) & 0o777
            if mode:
                os.chmod(target, mode)


def _extract_tar(archive: Path, dest: Path) -> None:
    with tarfile.open(archive, "r:*") as tf:
        members = tf.getmembers()
        for member in members:
            _safe_target(dest, member.name)
            if member.issym():
                _safe_target(dest, os.path.join(os.path.dirname(member.name), member.linkname))
            elif member.islnk():
                _safe_target(dest, member.linkname)
        if hasattr(tarfile, "data_filter"):
            tf.extractall(dest, members=members, filter="data")
        else:
            tf.extractall(dest, members=members)


def extract_archive(archive: Path, destination: Path) -> ExtractResult:
    """Unpack a zip or tar archive into destination.

    Returns NOT_AN_ARCHIVE when the file is neither, without touching
    destination. Returns FAILED on I/O errors, corrupt archives and entries
    that would land outside destination.
    """
    try:
        if zipfile.is_zipfile(archive):
            extractor = _extract_zip
        elif tarfile.is_tarfile(archive):
            extractor = _extract_tar
        else:
            return ExtractResult(ExtractStatus.NOT_AN_ARCHIVE, f"{archive.name} is not an archive")
    except OSError as e:
        return ExtractResult(ExtractStatus.FAILED, f"Cannot read {archive}: {e}")

    _logging.debug(f"Extracting {archive} to {destination}")
    try:
        destination.mkdir(parents=True, exist_ok=True)
        extractor(archive, destination)
    except _UnsafeMember as e:
        return ExtractResult(ExtractStatus.FAILED, str(e))
    except (OSError, tarfile.TarError, zipfile.BadZipFile) as e:
        return ExtractResult(ExtractStatus.FAILED, f"Failed to extract {archive.name}: {e}")

    return ExtractResult(ExtractStatus.EXTRACTED)


__all__ = [
    "ExtractStatus",
    "ExtractResult",
    "extract_archive",
]
