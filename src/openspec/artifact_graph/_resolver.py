"""Tiered schema resolution.

Schemas are looked up in three tiers, highest precedence first:

1. Project: ``<project_root>/openspec/schemas/<name>/`` (only with a root)
2. User: ``$XDG_DATA_HOME/openspec/schemas/<name>/``
3. Package: the schemas shipped inside this package

A tier matches a name when its directory holds ``schema.yaml`` (preferred)
or ``schema.yml``. The first matching tier wins outright; tiers are never
merged.
"""

from __future__ import annotations

import difflib
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from openspec.config import (
    get_package_schemas_dir,
    get_project_schemas_dir,
    get_user_schemas_dir,
)
from openspec.exceptions import SchemaError, SchemaNotFoundError

from ._filesystem import LocalFileSystem
from ._models import SchemaInfo, SchemaSource
from ._schema import load_schema_file, normalize_schema_name

if TYPE_CHECKING:
    from collections.abc import Iterable

    from structlog.typing import FilteringBoundLogger

    from ._filesystem import FileSystem
    from ._models import Schema

SCHEMA_FILE_NAMES = ("schema.yaml", "schema.yml")
DEFAULT_SCHEMA = "spec-driven"


@dataclass(frozen=True, slots=True)
class SchemaTier:
    """One schema source directory.

    Attributes:
        source: Which tier this is.
        root: Directory holding one subdirectory per schema.
    """

    source: SchemaSource
    root: Path

    def schema_file(self, name: str, fs: FileSystem) -> Path | None:
        """Return the schema file for ``name`` in this tier, if present."""
        schema_dir = self.root / name
        for file_name in SCHEMA_FILE_NAMES:
            candidate = schema_dir / file_name
            if fs.is_file(candidate):
                return candidate
        return None

    def names(self, fs: FileSystem) -> list[str]:
        """Return the schema names this tier defines."""
        if not fs.is_dir(self.root):
            return []
        try:
            entries = fs.iter_dir(self.root)
        except OSError:
            return []
        return [
            entry.name
            for entry in entries
            if entry.is_dir and self.schema_file(entry.name, fs) is not None
        ]


@dataclass(frozen=True, slots=True)
class ResolvedSchemaLocation:
    """Where a schema name resolved to."""

    name: str
    source: SchemaSource
    schema_dir: Path
    schema_file: Path


@dataclass(frozen=True, slots=True)
class SchemaShadow:
    """A lower-precedence definition hidden by the active one."""

    source: SchemaSource
    path: Path

    def to_dict(self) -> dict[str, str]:
        return {"source": self.source.value, "path": str(self.path)}


@dataclass(frozen=True, slots=True)
class SchemaResolution:
    """Resolution of a schema name including shadowed definitions."""

    name: str
    source: SchemaSource
    path: Path
    shadows: tuple[SchemaShadow, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "source": self.source.value,
            "path": str(self.path),
            "shadows": [shadow.to_dict() for shadow in self.shadows],
        }


def get_schema_tiers(project_root: Path | None = None) -> list[SchemaTier]:
    """Return the schema tiers in precedence order.

    The project tier is included only when ``project_root`` is given.
    """
    tiers: list[SchemaTier] = []
    if project_root is not None:
        tiers.append(
            SchemaTier(SchemaSource.PROJECT, get_project_schemas_dir(Path(project_root)))
        )
    tiers.append(SchemaTier(SchemaSource.USER, get_user_schemas_dir()))
    tiers.append(SchemaTier(SchemaSource.PACKAGE, get_package_schemas_dir()))
    return tiers


def _locations(
    name: str, project_root: Path | None, fs: FileSystem
) -> list[ResolvedSchemaLocation]:
    normalized = normalize_schema_name(name)
    found: list[ResolvedSchemaLocation] = []
    for tier in get_schema_tiers(project_root):
        schema_file = tier.schema_file(normalized, fs)
        if schema_file is not None:
            found.append(
                ResolvedSchemaLocation(
                    name=normalized,
                    source=tier.source,
                    schema_dir=schema_file.parent,
                    schema_file=schema_file,
                )
            )
    return found


def find_schema(
    name: str,
    project_root: Path | None = None,
    *,
    fs: FileSystem | None = None,
) -> ResolvedSchemaLocation | None:
    """Return the winning tier's location for a schema name, or None."""
    fs = fs if fs is not None else LocalFileSystem()
    locations = _locations(name, project_root, fs)
    return locations[0] if locations else None


def get_schema_dir(
    name: str,
    project_root: Path | None = None,
    *,
    fs: FileSystem | None = None,
) -> Path | None:
    """Return the directory of the winning tier for a schema name, or None."""
    location = find_schema(name, project_root, fs=fs)
    return location.schema_dir if location is not None else None


def list_schemas(
    project_root: Path | None = None,
    *,
    fs: FileSystem | None = None,
) -> list[str]:
    """Return the sorted, deduplicated union of schema names across tiers."""
    fs = fs if fs is not None else LocalFileSystem()
    names: set[str] = set()
    for tier in get_schema_tiers(project_root):
        names.update(tier.names(fs))
    return sorted(names)


def suggest_schemas(name: str, available: Iterable[str], *, limit: int = 3) -> list[str]:
    """Return up to ``limit`` available names close to ``name``.

    Example:
        >>> suggest_schemas("spec-drivn", ["spec-driven", "tdd"])
        ['spec-driven']
    """
    return difflib.get_close_matches(name, list(available), n=limit, cutoff=0.6)


def schema_not_found(
    name: str,
    project_root: Path | None = None,
    *,
    fs: FileSystem | None = None,
) -> SchemaNotFoundError:
    """Build the error raised when ``name`` is absent from every tier."""
    available = list_schemas(project_root, fs=fs)
    msg = f"Schema '{name}' not found. Available schemas: {', '.join(available) or '(none)'}"
    suggestions = suggest_schemas(name, available)
    if suggestions:
        msg += f". Did you mean: {', '.join(suggestions)}?"
    return SchemaNotFoundError(msg, name=name, available=available)


def resolve_schema(
    name: str,
    project_root: Path | None = None,
    *,
    fs: FileSystem | None = None,
    logger: FilteringBoundLogger | None = None,
) -> Schema:
    """Resolve a schema name to a validated schema.

    Only the winning tier's file is loaded; lower tiers are never consulted
    once a match is found, even if the winner is invalid.

    Args:
        name: Schema name; a trailing ``.yaml``/``.yml`` is ignored.
        project_root: Enables the project tier when given.
        fs: Filesystem to query; defaults to the local filesystem.
        logger: Optional logger for resolution events.

    Raises:
        SchemaNotFoundError: If no tier defines the schema.
        SchemaLoadError: If the winning file cannot be read or parsed.
        SchemaValidationError: If the winning file is invalid.
    """
    fs = fs if fs is not None else LocalFileSystem()
    normalized = normalize_schema_name(name)
    location = find_schema(normalized, project_root, fs=fs)
    if location is None:
        raise schema_not_found(normalized, project_root, fs=fs)

    if logger is not None:
        logger.debug(
            "schema_resolved",
            schema=normalized,
            source=location.source.value,
            path=str(location.schema_file),
        )
    return load_schema_file(location.schema_file, fs=fs)


def list_schemas_with_info(
    project_root: Path | None = None,
    *,
    fs: FileSystem | None = None,
    logger: FilteringBoundLogger | None = None,
) -> list[SchemaInfo]:
    """Describe every resolvable schema, sorted by name.

    Each name is described by its winning tier. Schemas whose winning file
    fails to load are skipped.
    """
    fs = fs if fs is not None else LocalFileSystem()
    infos: list[SchemaInfo] = []
    for name in list_schemas(project_root, fs=fs):
        location = find_schema(name, project_root, fs=fs)
        if location is None:
            continue
        try:
            schema = load_schema_file(location.schema_file, fs=fs)
        except SchemaError as e:
            if logger is not None:
                logger.debug("schema_skipped", schema=name, error=str(e))
            continue
        infos.append(
            SchemaInfo(
                name=name,
                description=schema.description,
                artifacts=schema.artifact_ids,
                source=location.source,
            )
        )
    return infos


def get_schema_resolution(
    name: str,
    project_root: Path | None = None,
    *,
    fs: FileSystem | None = None,
) -> SchemaResolution | None:
    """Return the active definition of a schema and the ones it shadows."""
    fs = fs if fs is not None else LocalFileSystem()
    locations = _locations(name, project_root, fs)
    if not locations:
        return None
    active, *shadowed = locations
    return SchemaResolution(
        name=active.name,
        source=active.source,
        path=active.schema_dir,
        shadows=tuple(
            SchemaShadow(source=loc.source, path=loc.schema_dir) for loc in shadowed
        ),
    )


def get_schema_source(
    schema_dir: Path,
    project_root: Path | None = None,
) -> SchemaSource | None:
    """Return which tier a schema directory belongs to, if any.

    Both sides are resolved first, so relative or symlinked project roots
    still match.
    """
    parent = Path(schema_dir).resolve().parent
    for tier in get_schema_tiers(project_root):
        if parent == tier.root.resolve():
            return tier.source
    return None


def list_schema_resolutions(
    project_root: Path | None = None,
    *,
    fs: FileSystem | None = None,
) -> list[SchemaResolution]:
    """Return the resolution of every known schema, sorted by name."""
    fs = fs if fs is not None else LocalFileSystem()
    resolutions: list[SchemaResolution] = []
    for name in list_schemas(project_root, fs=fs):
        resolution = get_schema_resolution(name, project_root, fs=fs)
        if resolution is not None:
            resolutions.append(resolution)
    return resolutions
