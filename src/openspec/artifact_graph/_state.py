"""Completion detection for artifacts in a change directory.

An artifact is complete when its ``generates`` output exists. Literal paths
are checked directly. Glob patterns use a deliberately narrow matcher: the
pattern is split at its first wildcard segment, the prefix must be an
existing directory, an optional ``*.ext`` suffix filters files by extension,
and subdirectories are searched only when the pattern contains ``**``.
"""

from __future__ import annotations

import re
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from ._filesystem import LocalFileSystem

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from ._filesystem import FileSystem
    from ._graph import ArtifactGraph

_EXTENSION_RE = re.compile(r"\*(\.[a-zA-Z0-9]+)$")


def _split_pattern(pattern: str) -> tuple[str, ...]:
    return PurePosixPath(pattern).parts


def _has_matching_file(
    directory: Path,
    extension: str | None,
    *,
    recursive: bool,
    fs: FileSystem,
) -> bool:
    try:
        entries = fs.iter_dir(directory)
    except OSError:
        return False

    for entry in entries:
        if entry.is_file and (extension is None or entry.name.endswith(extension)):
            return True

    if recursive:
        for entry in entries:
            if entry.is_dir and _has_matching_file(
                directory / entry.name, extension, recursive=True, fs=fs
            ):
                return True
    return False


def artifact_output_exists(
    change_dir: Path,
    generates: str,
    fs: FileSystem | None = None,
) -> bool:
    """Return True if an artifact's output exists in ``change_dir``.

    Args:
        change_dir: The change directory.
        generates: Literal relative path or glob pattern.
        fs: Filesystem to query; defaults to the local filesystem.

    Example:
        >>> artifact_output_exists(change_dir, "specs/**/*.md")
        True
    """
    fs = fs if fs is not None else LocalFileSystem()
    change_dir = Path(change_dir)

    if "*" not in generates:
        return fs.exists(change_dir / generates)

    parts = _split_pattern(generates)
    wildcard_index = next(i for i, part in enumerate(parts) if "*" in part)
    base_dir = change_dir.joinpath(*parts[:wildcard_index])
    if not fs.is_dir(base_dir):
        return False

    match = _EXTENSION_RE.search(generates)
    extension = match.group(1) if match else None
    return _has_matching_file(base_dir, extension, recursive="**" in generates, fs=fs)


def detect_completed(
    graph: ArtifactGraph,
    change_dir: Path,
    fs: FileSystem | None = None,
    *,
    logger: FilteringBoundLogger | None = None,
) -> frozenset[str]:
    """Return the ids of every artifact whose output exists.

    A missing change directory yields an empty set.
    """
    fs = fs if fs is not None else LocalFileSystem()
    change_dir = Path(change_dir)
    if not fs.is_dir(change_dir):
        if logger is not None:
            logger.debug("change_dir_missing", change_dir=str(change_dir))
        return frozenset()

    completed = frozenset(
        artifact.id
        for artifact in graph.get_all_artifacts()
        if artifact_output_exists(change_dir, artifact.generates, fs)
    )
    if logger is not None:
        logger.debug(
            "detected_completed",
            change_dir=str(change_dir),
            completed=sorted(completed),
        )
    return completed
