"""Tests for archive extraction."""

import io
import os
import stat
import tarfile
import zipfile

import pytest

from smtmgr.archive import ExtractStatus, extract_archive
from tests.conftest import Z3_SCRIPT, write_zip


def _write_tar_gz(path, members: dict[str, bytes]):
    with tarfile.open(path, "w:gz") as tf:
        for name, data in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o755
            tf.addfile(info, io.BytesIO(data))
    return path


class TestExtractArchive:
    def test_zip(self, temp_dir):
        archive = write_zip(temp_dir / "z3.zip", {"bin/z3": Z3_SCRIPT, "LICENSE.txt": b"MIT"})
        dest = temp_dir / "out"
        result = extract_archive(archive, dest)
        assert result.status == ExtractStatus.EXTRACTED
        assert result.ok
        assert (dest / "bin" / "z3").read_bytes() == Z3_SCRIPT
        assert (dest / "LICENSE.txt").read_bytes() == b"MIT"

    @pytest.mark.skipif(os.name == "nt", reason="unix permissions")
    def test_zip_keeps_executable_bit(self, temp_dir):
        archive = write_zip(temp_dir / "z3.zip", {"bin/z3": Z3_SCRIPT})
        dest = temp_dir / "out"
        extract_archive(archive, dest)
        assert (dest / "bin" / "z3").stat().st_mode & stat.S_IXUSR

    def test_tar_gz(self, temp_dir):
        archive = _write_tar_gz(temp_dir / "cvc5.tar.gz", {"cvc5/bin/cvc5": b"binary"})
        dest = temp_dir / "out"
        result = extract_archive(archive, dest)
        assert result.status == ExtractStatus.EXTRACTED
        assert (dest / "cvc5" / "bin" / "cvc5").read_bytes() == b"binary"

    def test_not_an_archive(self, temp_dir):
        binary = temp_dir / "cvc5-Linux"
        binary.write_bytes(b"\x7fELF\x02\x01\x01" + b"\x00" * 64)
        dest = temp_dir / "out"
        result = extract_archive(binary, dest)
        assert result.status == ExtractStatus.NOT_AN_ARCHIVE
        assert not result.ok
        assert not dest.exists()

    def test_path_traversal_is_refused(self, temp_dir):
        archive = temp_dir / "evil.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("../evil.txt", b"owned")
        dest = temp_dir / "out"
        result = extract_archive(archive, dest)
        assert result.status == ExtractStatus.FAILED
        assert "invalid path" in result.message
        assert not (temp_dir / "evil.txt").exists()

    def test_absolute_member_is_refused(self, temp_dir):
        archive = _write_tar_gz(temp_dir / "evil.tar.gz", {"/tmp/evil.txt": b"owned"})
        result = extract_archive(archive, temp_dir / "out")
        assert result.status == ExtractStatus.FAILED

    def test_missing_file_fails(self, temp_dir):
        result = extract_archive(temp_dir / "missing.zip", temp_dir / "out")
        assert result.status == ExtractStatus.FAILED
