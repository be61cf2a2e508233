"""Change directory helpers: naming, creation and discovery."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from openspec.artifact_graph import (
    DEFAULT_SCHEMA,
    LocalFileSystem,
    list_schemas,
    normalize_schema_name,
)
from openspec.config import get_change_dir, get_changes_dir, read_project_config
from openspec.exceptions import (
    ChangeExistsError,
    ChangeNotFoundError,
    InvalidChangeNameError,
    SchemaNotFoundError,
)

from ._metadata import ChangeMetadata, write_change_metadata

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from openspec.artifact_graph import FileSystem
    from openspec.diagnostics import DiagnosticsCollector

_KEBAB_CASE_RE = re.compile(r"^[a-z][a-z0-9]*(-[a-z0-9]+)*$")
ARCHIVE_DIR_NAME = "archive"

# Checked in order; the first matching rule explains the rejection.
_NAME_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[A-Z]"), "Change name must be lowercase (use kebab-case)"),
    (re.compile(r"\s"), "Change name cannot contain spaces (use hyphens instead)"),
    (re.compile(r"_"), "Change name cannot contain underscores (use hyphens instead)"),
    (re.compile(r"^-"), "Change name cannot start with a hyphen"),
    (re.compile(r"-$"), "Change name cannot end with a hyphen"),
    (re.compile(r"--"), "Change name cannot contain consecutive hyphens"),
    (
        re.compile(r"[^a-z0-9-]"),
        "Change name can only contain lowercase letters, numbers, and hyphens",
    ),
    (re.compile(r"^[0-9]"), "Change name must start with a letter"),
)


def validate_change_name(name: str) -> None:
    """Validate that a change name is kebab-case.

    Raises:
        InvalidChangeNameError: With a message naming the specific problem.

    Examples:
        >>> validate_change_name("add-auth")
        >>> validate_change_name("Add-Auth")
        Traceback (most recent call last):
        ...
        openspec.exceptions.InvalidChangeNameError: Change name must be lowercase (use kebab-case)
    """
    if not name:
        msg = "Change name cannot be empty"
        raise InvalidChangeNameError(msg, change_name=name)

    if _KEBAB_CASE_RE.match(name):
        return

    for pattern, message in _NAME_RULES:
        if pattern.search(name):
            raise InvalidChangeNameError(message, change_name=name)

    msg = "Change name must follow kebab-case convention (e.g., add-auth, refactor-db)"
    raise InvalidChangeNameError(msg, change_name=name)


@dataclass(frozen=True, slots=True)
class CreatedChange:
    """Result of creating a change."""

    name: str
    change_dir: Path
    schema_name: str
    metadata_path: Path


def create_change(
    project_root: Path,
    name: str,
    schema: str | None = None,
    *,
    description: str | None = None,
    diagnostics: DiagnosticsCollector | None = None,
    logger: FilteringBoundLogger | None = None,
) -> CreatedChange:
    """Create ``openspec/changes/<name>/`` with a ``.openspec.yaml``.

    The schema is ``schema`` if given, else the project config's default,
    else ``spec-driven``. A ``description`` is written to ``README.md``.

    Raises:
        InvalidChangeNameError: If ``name`` is not kebab-case.
        SchemaNotFoundError: If the chosen schema does not exist.
        ChangeExistsError: If the change directory already exists.
        ChangeMetadataError: If the metadata file cannot be written.
    """
    validate_change_name(name)
    project_root = Path(project_root)

    schema_name = schema
    if not schema_name:
        config, found = read_project_config(project_root)
        if diagnostics is not None:
            diagnostics.extend(found)
        schema_name = config.schema_name if config is not None and config.schema_name else None
    schema_name = normalize_schema_name(schema_name or DEFAULT_SCHEMA)

    available = list_schemas(project_root)
    if schema_name not in available:
        msg = f"Unknown schema '{schema_name}'. Available: {', '.join(available)}"
        raise SchemaNotFoundError(msg, name=schema_name, available=available)

    change_dir = get_change_dir(project_root, name)
    if change_dir.exists():
        msg = f"Change '{name}' already exists at {change_dir}"
        raise ChangeExistsError(msg, path=change_dir)

    change_dir.mkdir(parents=True)
    metadata = ChangeMetadata(
        schema_name=schema_name,
        created=datetime.now(tz=UTC).date(),
    )
    metadata_path = write_change_metadata(change_dir, metadata, project_root)
    if description:
        (change_dir / "README.md").write_text(
            f"# {name}\n\n{description}\n", encoding="utf-8"
        )

    if logger is not None:
        logger.info("change_created", change=name, schema=schema_name, path=str(change_dir))

    return CreatedChange(
        name=name,
        change_dir=change_dir,
        schema_name=schema_name,
        metadata_path=metadata_path,
    )


def list_changes(project_root: Path, *, fs: FileSystem | None = None) -> list[str]:
    """Return the sorted names of active changes.

    Hidden directories and ``archive/`` are excluded.
    """
    fs = fs if fs is not None else LocalFileSystem()
    changes_dir = get_changes_dir(Path(project_root))
    if not fs.is_dir(changes_dir):
        return []
    return [
        entry.name
        for entry in fs.iter_dir(changes_dir)
        if entry.is_dir
        and not entry.name.startswith(".")
        and entry.name != ARCHIVE_DIR_NAME
    ]


def require_change(
    project_root: Path,
    name: str | None,
    *,
    fs: FileSystem | None = None,
) -> Path:
    """Return the directory of an existing change.

    Raises:
        ChangeNotFoundError: If ``name`` is missing or the change does not
            exist; the message lists the available changes.
    """
    fs = fs if fs is not None else LocalFileSystem()
    project_root = Path(project_root)
    available = list_changes(project_root, fs=fs)

    if not name:
        listing = ", ".join(available) if available else "(none)"
        msg = f"Missing required option --change. Available changes: {listing}"
        raise ChangeNotFoundError(msg, change_name=None, available=available)

    change_dir = get_change_dir(project_root, name)
    if not fs.is_dir(change_dir):
        listing = ", ".join(available) if available else "(none)"
        msg = f"Change '{name}' not found. Available changes: {listing}"
        raise ChangeNotFoundError(msg, change_name=name, available=available)
    return change_dir
