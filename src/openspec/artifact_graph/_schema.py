"""Schema parsing and validation.

A schema document is YAML. Parsing happens in three stages:

1. YAML syntax (``SchemaLoadError`` on failure or non-mapping documents)
2. Structure via the Pydantic models (``SchemaValidationError``)
3. Semantics: unique ids, resolvable ``requires`` and an acyclic graph
   (``SchemaValidationError``)
"""

from __future__ import annotations

import re
from enum import IntEnum
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import ValidationError

from openspec.exceptions import SchemaLoadError, SchemaValidationError

from ._filesystem import LocalFileSystem
from ._models import Schema

if TYPE_CHECKING:
    from ._filesystem import FileSystem

_YAML_SUFFIX_RE = re.compile(r"\.ya?ml$")


def normalize_schema_name(name: str) -> str:
    """Strip a trailing ``.yaml`` or ``.yml`` from a schema name.

    Example:
        >>> normalize_schema_name("spec-driven.yaml")
        'spec-driven'
    """
    return _YAML_SUFFIX_RE.sub("", name)


def _format_pydantic_errors(exc: ValidationError) -> tuple[str, list[str]]:
    parts: list[str] = []
    fields: list[str] = []
    for error in exc.errors():
        loc = ".".join(str(part) for part in error["loc"]) or "<root>"
        fields.append(loc)
        parts.append(f"{loc}: {error['msg']}")
    return "; ".join(parts), fields


def _check_unique_ids(schema: Schema) -> None:
    seen: set[str] = set()
    duplicates: list[str] = []
    for artifact_id in schema.artifact_ids:
        if artifact_id in seen and artifact_id not in duplicates:
            duplicates.append(artifact_id)
        seen.add(artifact_id)
    if duplicates:
        msg = f"Duplicate artifact ID: {', '.join(duplicates)}"
        raise SchemaValidationError(msg, artifact_ids=duplicates)


def _check_references(schema: Schema) -> None:
    ids = set(schema.artifact_ids)
    for artifact in schema.artifacts:
        for required in artifact.requires:
            if required not in ids:
                msg = (
                    f"Invalid dependency reference in artifact '{artifact.id}': "
                    f"'{required}' does not exist"
                )
                raise SchemaValidationError(msg, artifact_ids=[artifact.id, required])

    if schema.apply is not None:
        for required in schema.apply.requires:
            if required not in ids:
                msg = (
                    f"Invalid apply.requires reference: "
                    f"'{required}' does not exist"
                )
                raise SchemaValidationError(msg, artifact_ids=[required])


class _Color(IntEnum):
    WHITE = 0
    GRAY = 1
    BLACK = 2


def find_cycle(requires: dict[str, tuple[str, ...]]) -> list[str] | None:
    """Find a dependency cycle using a three-color depth-first search.

    Nodes are visited in mapping order and edges in ``requires`` order, so the
    reported cycle is deterministic for a given declaration order.

    Args:
        requires: Mapping of artifact id to the ids it requires.

    Returns:
        The cycle path with its first id repeated last, or None if acyclic.
    """
    color = dict.fromkeys(requires, _Color.WHITE)
    path: list[str] = []

    def visit(node: str) -> list[str] | None:
        color[node] = _Color.GRAY
        path.append(node)
        for dep in requires.get(node, ()):
            state = color.get(dep, _Color.BLACK)
            if state is _Color.GRAY:
                start = path.index(dep)
                return [*path[start:], dep]
            if state is _Color.WHITE:
                found = visit(dep)
                if found is not None:
                    return found
        _ = path.pop()
        color[node] = _Color.BLACK
        return None

    for node in requires:
        if color[node] is _Color.WHITE:
            cycle = visit(node)
            if cycle is not None:
                return cycle
    return None


def _check_acyclic(schema: Schema) -> None:
    requires = {artifact.id: artifact.requires for artifact in schema.artifacts}
    cycle = find_cycle(requires)
    if cycle is not None:
        msg = f"Cyclic dependency detected: {' -> '.join(cycle)}"
        raise SchemaValidationError(msg, artifact_ids=cycle[:-1], cycle=cycle)


def validate_schema(data: Any) -> Schema:
    """Validate an already-parsed mapping into a Schema.

    Raises:
        SchemaValidationError: If the structure or semantics are invalid.
    """
    try:
        schema = Schema.model_validate(data)
    except ValidationError as e:
        detail, fields = _format_pydantic_errors(e)
        msg = f"Invalid schema: {detail}"
        raise SchemaValidationError(msg, artifact_ids=fields) from e

    _check_unique_ids(schema)
    _check_references(schema)
    _check_acyclic(schema)
    return schema


def parse_schema(content: str, *, path: Path | None = None) -> Schema:
    """Parse and validate schema YAML.

    Args:
        content: The YAML document text.
        path: Source path, used only for error messages.

    Returns:
        The validated schema.

    Raises:
        SchemaLoadError: If the text is not valid YAML or not a mapping.
        SchemaValidationError: If the schema is structurally or semantically
            invalid.
    """
    source = str(path) if path is not None else "<string>"
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        msg = f"Failed to parse schema YAML at '{source}': {e}"
        raise SchemaLoadError(msg, path=path, cause=e) from e

    if not isinstance(data, dict):
        msg = f"Failed to parse schema at '{source}': expected a mapping"
        raise SchemaLoadError(msg, path=path)

    return validate_schema(data)


def load_schema_file(path: Path, *, fs: FileSystem | None = None) -> Schema:
    """Read and parse a schema file.

    Raises:
        SchemaLoadError: If the file cannot be read or decoded, or is not
            valid YAML.
        SchemaValidationError: If the schema is invalid; the message and
            ``path`` attribute identify the file.
    """
    fs = fs if fs is not None else LocalFileSystem()
    path = Path(path)
    try:
        content = fs.read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Failed to read schema at '{path}': {e}"
        raise SchemaLoadError(msg, path=path, cause=e) from e

    try:
        return parse_schema(content, path=path)
    except SchemaValidationError as e:
        msg = f"Invalid schema at '{path}': {e}"
        raise SchemaValidationError(
            msg, path=path, artifact_ids=e.artifact_ids, cycle=e.cycle
        ) from e


def serialize_schema(schema: Schema) -> dict[str, Any]:
    """Dump a schema back to a YAML-compatible mapping.

    Optional fields are omitted when unset so the output mirrors a
    hand-written schema file.
    """
    artifacts: list[dict[str, Any]] = []
    for artifact in schema.artifacts:
        entry: dict[str, Any] = {
            "id": artifact.id,
            "generates": artifact.generates,
            "description": artifact.description,
            "template": artifact.template,
        }
        if artifact.instruction is not None:
            entry["instruction"] = artifact.instruction
        entry["requires"] = list(artifact.requires)
        artifacts.append(entry)

    data: dict[str, Any] = {"name": schema.name, "version": schema.version}
    if schema.description:
        data["description"] = schema.description
    data["artifacts"] = artifacts

    if schema.apply is not None:
        apply: dict[str, Any] = {"requires": list(schema.apply.requires)}
        if schema.apply.tracks is not None:
            apply["tracks"] = schema.apply.tracks
        if schema.apply.instruction is not None:
            apply["instruction"] = schema.apply.instruction
        data["apply"] = apply

    return data
