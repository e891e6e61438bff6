"""
Tests cho core.fs_ops (async wrappers).

Coverage:
- stat(): path thieu -> FileNotFound, phan loai file/dir/symlink
- mkdirp(): idempotent, tao thu muc cha, fail neu la file
- rimraf(): xoa de quy, khong follow symlink
- readdir()/read_file() error mapping
"""

import asyncio
import os
import sys

import pytest

from core import fs_ops
from core.file_types import FileType
from core.fs_errors import FileExists, FileIsADirectory, FileNotFound

needs_symlinks = pytest.mark.skipif(
    sys.platform == "win32", reason="symlink can quyen admin tren Windows"
)


class TestStat:
    """Test stat()."""

    def test_missing_path_raises_not_found(self, tmp_path):
        with pytest.raises(FileNotFound):
            asyncio.run(fs_ops.stat(str(tmp_path / "missing.sql")))

    def test_file(self, tmp_path):
        target = tmp_path / "a.sql"
        target.write_bytes(b"select 1;")

        info = asyncio.run(fs_ops.stat(str(target)))

        assert info.type == FileType.FILE
        assert info.is_file
        assert not info.is_directory
        assert info.size == 9
        assert info.mtime > 0

    def test_directory(self, tmp_path):
        info = asyncio.run(fs_ops.stat(str(tmp_path)))
        assert info.type == FileType.DIRECTORY

    @needs_symlinks
    def test_symlink_to_directory(self, tmp_path):
        (tmp_path / "real").mkdir()
        link = tmp_path / "link"
        link.symlink_to(tmp_path / "real", target_is_directory=True)

        info = asyncio.run(fs_ops.stat(str(link)))

        assert info.type == FileType.SYMBOLIC_LINK | FileType.DIRECTORY
        assert info.is_symbolic_link
        assert info.is_directory

    @needs_symlinks
    def test_dangling_symlink(self, tmp_path):
        link = tmp_path / "dangling"
        link.symlink_to(tmp_path / "gone")

        info = asyncio.run(fs_ops.stat(str(link)))

        assert info.type == FileType.SYMBOLIC_LINK


class TestMkdirp:
    """Test tao thu muc idempotent."""

    def test_creates_intermediate_directories(self, tmp_path):
        target = tmp_path / "a" / "b" / "c"
        asyncio.run(fs_ops.mkdirp(str(target)))
        assert target.is_dir()

    def test_existing_directory_is_noop(self, tmp_path):
        target = tmp_path / "scripts"
        target.mkdir()
        (target / "keep.sql").write_text("select 1;")

        asyncio.run(fs_ops.mkdirp(str(target)))
        asyncio.run(fs_ops.mkdirp(str(target)))

        assert target.is_dir()
        assert sorted(os.listdir(target)) == ["keep.sql"]

    def test_existing_file_fails(self, tmp_path):
        target = tmp_path / "not_a_dir"
        target.write_text("x")

        with pytest.raises(FileExists):
            asyncio.run(fs_ops.mkdirp(str(target)))


class TestRimraf:
    """Test xoa de quy."""

    def test_removes_nested_tree(self, tmp_path):
        root = tmp_path / "root"
        (root / "a" / "b").mkdir(parents=True)
        (root / "a" / "b" / "deep.sql").write_text("x")
        (root / "a" / "mid.sql").write_text("x")
        (root / "top.sql").write_text("x")

        asyncio.run(fs_ops.rimraf(str(root)))

        assert not root.exists()
        with pytest.raises(FileNotFound):
            asyncio.run(fs_ops.readdir(str(root)))

    def test_removes_single_file(self, tmp_path):
        target = tmp_path / "a.sql"
        target.write_text("x")
        asyncio.run(fs_ops.rimraf(str(target)))
        assert not target.exists()

    def test_missing_path_raises_not_found(self, tmp_path):
        with pytest.raises(FileNotFound):
            asyncio.run(fs_ops.rimraf(str(tmp_path / "missing")))

    @needs_symlinks
    def test_does_not_follow_symlinked_directory(self, tmp_path):
        real = tmp_path / "real"
        real.mkdir()
        (real / "keep.sql").write_text("x")
        holder = tmp_path / "holder"
        holder.mkdir()
        (holder / "link").symlink_to(real, target_is_directory=True)

        asyncio.run(fs_ops.rimraf(str(holder)))

        assert not holder.exists()
        assert (real / "keep.sql").exists()


class TestReadWrite:
    """Test readdir/read_file/write_bytes."""

    def test_readdir_lists_names(self, tmp_path):
        (tmp_path / "x.sql").write_text("x")
        (tmp_path / "sub").mkdir()
        names = asyncio.run(fs_ops.readdir(str(tmp_path)))
        assert sorted(names) == ["sub", "x.sql"]

    def test_readdir_missing_raises_not_found(self, tmp_path):
        with pytest.raises(FileNotFound):
            asyncio.run(fs_ops.readdir(str(tmp_path / "nope")))

    @pytest.mark.skipif(sys.platform == "win32", reason="Windows tra ve EACCES")
    def test_read_directory_as_file_raises_is_a_directory(self, tmp_path):
        with pytest.raises(FileIsADirectory):
            asyncio.run(fs_ops.read_file(str(tmp_path)))

    def test_write_then_read(self, tmp_path):
        target = str(tmp_path / "q.sql")
        asyncio.run(fs_ops.write_bytes(target, b"select now();"))
        assert asyncio.run(fs_ops.read_file(target)) == b"select now();"

    def test_exists(self, tmp_path):
        assert asyncio.run(fs_ops.exists(str(tmp_path))) is True
        assert asyncio.run(fs_ops.exists(str(tmp_path / "nope"))) is False

    @needs_symlinks
    def test_lexists_sees_dangling_link(self, tmp_path):
        link = tmp_path / "dangling.sql"
        link.symlink_to(tmp_path / "missing.sql")

        assert asyncio.run(fs_ops.exists(str(link))) is False
        assert asyncio.run(fs_ops.lexists(str(link))) is True

    def test_same_entry(self, tmp_path):
        first = tmp_path / "a.sql"
        second = tmp_path / "b.sql"
        first.write_text("x")
        second.write_text("x")

        assert asyncio.run(fs_ops.same_entry(str(first), str(first))) is True
        assert asyncio.run(fs_ops.same_entry(str(first), str(second))) is False
        assert asyncio.run(fs_ops.same_entry(str(first), str(tmp_path / "nope"))) is False


class TestNormalizeNfc:
    """normalize_nfc chi co tac dung tren macOS."""

    def test_non_darwin_returns_input(self, monkeypatch):
        monkeypatch.setattr(fs_ops.sys, "platform", "linux")
        decomposed = "cafe\u0301.sql"
        assert fs_ops.normalize_nfc(decomposed) == decomposed

    def test_darwin_normalizes_lists(self, monkeypatch):
        monkeypatch.setattr(fs_ops.sys, "platform", "darwin")
        assert fs_ops.normalize_nfc(["cafe\u0301.sql"]) == ["caf\u00e9.sql"]
