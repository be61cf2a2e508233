"""Project schema authoring: forking an existing schema and creating a new one.

Both operations write into the project tier (``openspec/schemas/<name>/``),
which shadows the user and package tiers for that name.
"""

from __future__ import annotations

import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from openspec.config import (
    get_package_schemas_dir,
    get_project_schemas_dir,
    set_default_schema,
)
from openspec.exceptions import (
    ArtifactNotFoundError,
    InvalidSchemaNameError,
    SchemaExistsError,
    SchemaValidationError,
)

from ._resolver import DEFAULT_SCHEMA, find_schema, schema_not_found
from ._schema import load_schema_file, serialize_schema, validate_schema

if TYPE_CHECKING:
    from collections.abc import Sequence

    from structlog.typing import FilteringBoundLogger

    from ._models import ArtifactDefinition, SchemaSource

_SCHEMA_NAME_RE = re.compile(r"^[a-z][a-z0-9]*(-[a-z0-9]+)*$")


def validate_schema_name(name: str) -> None:
    """Validate that a new schema name is kebab-case.

    Raises:
        InvalidSchemaNameError: If ``name`` is not kebab-case.
    """
    if not _SCHEMA_NAME_RE.match(name):
        msg = f"Invalid schema name '{name}'. Use kebab-case (e.g., my-workflow)"
        raise InvalidSchemaNameError(msg, schema_name=name)


def _prepare_destination(destination: Path, *, force: bool, hint: str) -> None:
    if not destination.exists():
        return
    if not force:
        msg = f"Schema '{destination.name}' already exists at {destination}. {hint}"
        raise SchemaExistsError(msg, path=destination)
    shutil.rmtree(destination)


def _dump_schema(data: dict[str, Any]) -> str:
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)


@dataclass(frozen=True, slots=True)
class ForkedSchema:
    """Result of forking a schema into the project tier."""

    source: str
    source_path: Path
    source_location: SchemaSource
    destination: str
    destination_path: Path

    def to_dict(self) -> dict[str, Any]:
        return {
            "forked": True,
            "source": self.source,
            "sourcePath": str(self.source_path),
            "sourceLocation": self.source_location.value,
            "destination": self.destination,
            "destinationPath": str(self.destination_path),
        }


def fork_schema(
    source: str,
    project_root: Path,
    name: str | None = None,
    *,
    force: bool = False,
    logger: FilteringBoundLogger | None = None,
) -> ForkedSchema:
    """Copy a resolved schema into the project tier under a new name.

    The whole schema directory (templates included) is copied, then the
    schema file is rewritten with ``name`` as the schema's name.

    Args:
        source: Schema to fork, resolved through the usual tiers.
        project_root: Project whose ``openspec/schemas`` receives the copy.
        name: New schema name; defaults to ``<source>-custom``.
        force: Replace an existing project schema of the same name.
        logger: Optional logger.

    Raises:
        InvalidSchemaNameError: If the destination name is not kebab-case.
        SchemaNotFoundError: If ``source`` is not defined in any tier.
        SchemaExistsError: If the destination exists and ``force`` is not set,
            or if it is the source directory itself.
        SchemaLoadError: If the source schema file cannot be read.
        SchemaValidationError: If the source schema is invalid.
    """
    project_root = Path(project_root)
    destination = name or f"{source}-custom"
    validate_schema_name(destination)

    location = find_schema(source, project_root)
    if location is None:
        raise schema_not_found(source, project_root)

    schema = load_schema_file(location.schema_file)
    destination_dir = get_project_schemas_dir(project_root) / destination
    if destination_dir.resolve() == location.schema_dir.resolve():
        msg = f"Cannot fork schema '{source}' onto itself at {destination_dir}"
        raise SchemaExistsError(msg, path=destination_dir)
    _prepare_destination(destination_dir, force=force, hint="Use --force to overwrite")

    _ = shutil.copytree(location.schema_dir, destination_dir)
    data = serialize_schema(schema.model_copy(update={"name": destination}))
    _ = (destination_dir / location.schema_file.name).write_text(
        _dump_schema(data), encoding="utf-8"
    )

    if logger is not None:
        logger.info(
            "schema_forked",
            source=source,
            source_location=location.source.value,
            destination=destination,
            path=str(destination_dir),
        )

    return ForkedSchema(
        source=source,
        source_path=location.schema_dir,
        source_location=location.source,
        destination=destination,
        destination_path=destination_dir,
    )


@dataclass(frozen=True, slots=True)
class InitializedSchema:
    """Result of creating a new project schema."""

    name: str
    path: Path
    artifacts: tuple[str, ...]
    set_as_default: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "created": True,
            "path": str(self.path),
            "schema": self.name,
            "artifacts": list(self.artifacts),
            "setAsDefault": self.set_as_default,
        }


def _starter_artifacts() -> tuple[Path, dict[str, ArtifactDefinition]]:
    schema_dir = get_package_schemas_dir() / DEFAULT_SCHEMA
    schema = load_schema_file(schema_dir / "schema.yaml")
    return schema_dir, {artifact.id: artifact for artifact in schema.artifacts}


def _starter_requires(artifact_id: str, selected: Sequence[str]) -> list[str]:
    # A straight chain over whichever starter artifacts were picked.
    if artifact_id == "specs" and "proposal" in selected:
        return ["proposal"]
    if artifact_id == "design" and "specs" in selected:
        return ["specs"]
    if artifact_id == "tasks":
        if "design" in selected:
            return ["design"]
        if "specs" in selected:
            return ["specs"]
    return []


def init_schema(
    name: str,
    project_root: Path,
    *,
    description: str | None = None,
    artifacts: Sequence[str] | None = None,
    set_default: bool = False,
    force: bool = False,
    logger: FilteringBoundLogger | None = None,
) -> InitializedSchema:
    """Create a new project schema from the packaged starter artifacts.

    The starter artifacts are those of the packaged ``spec-driven`` schema
    (proposal, specs, design, tasks). Selected artifacts are chained in that
    order, templates are copied from the packaged schema, and an ``apply``
    block tracking ``tasks.md`` is added when ``tasks`` is selected.

    Args:
        name: Kebab-case name of the new schema.
        project_root: Project whose ``openspec/schemas`` receives the schema.
        description: Schema description; defaults to a generic one.
        artifacts: Starter artifact ids to include; defaults to all of them.
        set_default: Also record the schema as the project default in
            ``openspec/config.yaml``.
        force: Replace an existing project schema of the same name.
        logger: Optional logger.

    Raises:
        InvalidSchemaNameError: If ``name`` is not kebab-case.
        ArtifactNotFoundError: If an artifact id is not a starter artifact.
        SchemaValidationError: If ``artifacts`` is empty.
        SchemaExistsError: If the schema exists and ``force`` is not set.
        ConfigError: If ``set_default`` is given and the config file cannot
            be updated.
    """
    project_root = Path(project_root)
    validate_schema_name(name)

    starter_dir, starters = _starter_artifacts()
    selected = list(starters) if artifacts is None else list(dict.fromkeys(artifacts))
    for artifact_id in selected:
        if artifact_id not in starters:
            msg = (
                f"Unknown artifact '{artifact_id}'. "
                f"Valid artifacts: {', '.join(starters)}"
            )
            raise ArtifactNotFoundError(
                msg,
                artifact_id=artifact_id,
                schema_name=DEFAULT_SCHEMA,
                valid_ids=tuple(starters),
            )
    if not selected:
        msg = "At least one artifact must be selected"
        raise SchemaValidationError(msg)

    schema_dir = get_project_schemas_dir(project_root) / name
    _prepare_destination(
        schema_dir,
        force=force,
        hint='Use --force to overwrite or "openspec schema fork" to copy',
    )

    data: dict[str, Any] = {
        "name": name,
        "version": 1,
        "description": description or f"Custom workflow schema for {name}",
        "artifacts": [
            {
                "id": artifact_id,
                "generates": starters[artifact_id].generates,
                "description": starters[artifact_id].description,
                "template": starters[artifact_id].template,
                "requires": _starter_requires(artifact_id, selected),
            }
            for artifact_id in selected
        ],
    }
    if "tasks" in selected:
        data["apply"] = {"requires": ["tasks"], "tracks": "tasks.md"}
    schema = validate_schema(data)

    templates_dir = schema_dir / "templates"
    templates_dir.mkdir(parents=True)
    _ = (schema_dir / "schema.yaml").write_text(
        _dump_schema(serialize_schema(schema)), encoding="utf-8"
    )
    for artifact in schema.artifacts:
        target = templates_dir / artifact.template
        target.parent.mkdir(parents=True, exist_ok=True)
        _ = shutil.copyfile(starter_dir / "templates" / artifact.template, target)

    if set_default:
        _ = set_default_schema(project_root, name)

    if logger is not None:
        logger.info(
            "schema_initialized",
            schema=name,
            artifacts=list(schema.artifact_ids),
            default=set_default,
        )

    return InitializedSchema(
        name=name,
        path=schema_dir,
        artifacts=schema.artifact_ids,
        set_as_default=set_default,
    )
