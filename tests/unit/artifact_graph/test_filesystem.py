"""Unit tests for the in-memory filesystem used by engine tests."""

from pathlib import Path

import pytest

from openspec.artifact_graph import DirEntry, FileSystem, LocalFileSystem, MemoryFileSystem


class TestMemoryFileSystem:
    def test_parent_directories_are_implied(self) -> None:
        fs = MemoryFileSystem()
        fs.add_file(Path("/a/b/c.md"), "x")

        assert fs.is_dir(Path("/a"))
        assert fs.is_dir(Path("/a/b"))
        assert not fs.is_dir(Path("/a/b/c.md"))
        assert fs.is_file(Path("/a/b/c.md"))

    def test_iter_dir_is_sorted_and_typed(self) -> None:
        fs = MemoryFileSystem()
        fs.add_file(Path("/d/z.md"))
        fs.add_file(Path("/d/a/inner.md"))
        fs.add_dir(Path("/d/empty"))

        assert fs.iter_dir(Path("/d")) == [
            DirEntry(name="a", is_dir=True, is_file=False),
            DirEntry(name="empty", is_dir=True, is_file=False),
            DirEntry(name="z.md", is_dir=False, is_file=True),
        ]

    def test_iter_dir_on_missing_directory_raises(self) -> None:
        with pytest.raises(NotADirectoryError):
            _ = MemoryFileSystem().iter_dir(Path("/missing"))

    def test_read_missing_file_raises(self) -> None:
        with pytest.raises(FileNotFoundError):
            _ = MemoryFileSystem().read_text(Path("/missing.md"))

    def test_remove_directory_removes_children(self) -> None:
        fs = MemoryFileSystem()
        fs.add_file(Path("/d/a.md"))
        fs.add_file(Path("/d/sub/b.md"))

        fs.remove(Path("/d"))

        assert not fs.exists(Path("/d"))
        assert not fs.exists(Path("/d/sub/b.md"))

    def test_satisfies_protocol(self) -> None:
        assert isinstance(MemoryFileSystem(), FileSystem)
        assert isinstance(LocalFileSystem(), FileSystem)


class TestLocalFileSystem:
    def test_iter_dir_is_sorted(self, tmp_path: Path) -> None:
        (tmp_path / "b.md").write_text("b")
        (tmp_path / "a").mkdir()

        entries = LocalFileSystem().iter_dir(tmp_path)

        assert [entry.name for entry in entries] == ["a", "b.md"]
        assert entries[0].is_dir
        assert entries[1].is_file

    def test_read_text(self, tmp_path: Path) -> None:
        path = tmp_path / "x.md"
        path.write_text("héllo", encoding="utf-8")

        assert LocalFileSystem().read_text(path) == "héllo"
