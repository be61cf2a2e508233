# ruff: noqa: TC003  # Path needed at runtime for Protocol method bodies
"""Filesystem protocol for the artifact graph engine.

Every filesystem interaction performed by the engine (artifact existence,
schema discovery, template and task file reads) goes through the narrow
``FileSystem`` protocol so that status and apply logic can be exercised
against ``MemoryFileSystem`` in tests.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class DirEntry:
    """A single directory listing entry.

    Attributes:
        name: Entry name (no path components).
        is_dir: Whether the entry is a directory.
        is_file: Whether the entry is a regular file.
    """

    name: str
    is_dir: bool
    is_file: bool


@runtime_checkable
class FileSystem(Protocol):
    """Protocol for the read-only filesystem operations the engine needs."""

    def exists(self, path: Path) -> bool:
        """Return True if anything exists at ``path``."""
        ...

    def is_dir(self, path: Path) -> bool:
        """Return True if ``path`` is a directory."""
        ...

    def is_file(self, path: Path) -> bool:
        """Return True if ``path`` is a regular file."""
        ...

    def iter_dir(self, path: Path) -> list[DirEntry]:
        """List the entries of a directory, sorted by name.

        Raises:
            OSError: If the directory cannot be listed.
        """
        ...

    def read_text(self, path: Path) -> str:
        """Read a file as UTF-8 text.

        Raises:
            OSError: If the file cannot be read.
        """
        ...


@dataclass(frozen=True, slots=True)
class LocalFileSystem:
    """FileSystem implementation backed by the real filesystem."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def is_file(self, path: Path) -> bool:
        try:
            return path.is_file()
        except OSError:
            return False

    def iter_dir(self, path: Path) -> list[DirEntry]:
        entries = [
            DirEntry(name=child.name, is_dir=child.is_dir(), is_file=child.is_file())
            for child in path.iterdir()
        ]
        return sorted(entries, key=lambda entry: entry.name)

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")


@dataclass(slots=True)
class MemoryFileSystem:
    """In-memory FileSystem for testing.

    Directories are implied by the files they contain; empty directories can
    be declared explicitly with ``add_dir``.

    Example:
        >>> fs = MemoryFileSystem()
        >>> fs.add_file(Path("/p/openspec/changes/c/proposal.md"), "# Proposal")
        >>> fs.is_dir(Path("/p/openspec/changes/c"))
        True
    """

    files: dict[Path, str] = field(default_factory=dict)
    dirs: set[Path] = field(default_factory=set)

    def add_file(self, path: Path, content: str = "") -> None:
        """Create or overwrite a file (parent directories are implied)."""
        self.files[Path(path)] = content

    def add_dir(self, path: Path) -> None:
        """Declare a directory, which may be empty."""
        self.dirs.add(Path(path))

    def remove(self, path: Path) -> None:
        """Remove a file, or a directory and everything below it."""
        target = Path(path)
        _ = self.files.pop(target, None)
        self.dirs.discard(target)
        for existing in [p for p in self.files if p.is_relative_to(target)]:
            del self.files[existing]
        self.dirs = {d for d in self.dirs if not d.is_relative_to(target)}

    def exists(self, path: Path) -> bool:
        return self.is_file(path) or self.is_dir(path)

    def is_dir(self, path: Path) -> bool:
        target = Path(path)
        if target in self.files:
            return False
        if any(d.is_relative_to(target) for d in self.dirs):
            return True
        return any(p.is_relative_to(target) and p != target for p in self.files)

    def is_file(self, path: Path) -> bool:
        return Path(path) in self.files

    def iter_dir(self, path: Path) -> list[DirEntry]:
        target = Path(path)
        if not self.is_dir(target):
            msg = f"Not a directory: {target}"
            raise NotADirectoryError(msg)

        names: dict[str, bool] = {}
        for candidate in [*self.files, *self.dirs]:
            if candidate == target or not candidate.is_relative_to(target):
                continue
            relative = candidate.relative_to(target)
            child = relative.parts[0]
            child_is_dir = len(relative.parts) > 1 or candidate in self.dirs
            names[child] = names.get(child, False) or child_is_dir

        return [
            DirEntry(name=name, is_dir=is_dir, is_file=not is_dir)
            for name, is_dir in sorted(names.items())
        ]

    def read_text(self, path: Path) -> str:
        try:
            return self.files[Path(path)]
        except KeyError:
            msg = f"No such file: {path}"
            raise FileNotFoundError(msg) from None
