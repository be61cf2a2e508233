# pyright: reportAny=false
"""Per-change metadata stored in ``.openspec.yaml``."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from openspec.artifact_graph import DEFAULT_SCHEMA, LocalFileSystem, list_schemas
from openspec.config import read_project_config
from openspec.diagnostics import DiagnosticKind
from openspec.exceptions import ChangeMetadataError

if TYPE_CHECKING:
    from openspec.artifact_graph import FileSystem
    from openspec.diagnostics import DiagnosticsCollector

METADATA_FILE_NAME = ".openspec.yaml"


class ChangeMetadata(BaseModel):
    """Contents of a change's ``.openspec.yaml``.

    Attributes:
        schema_name: Workflow schema the change was created with.
        created: Creation date.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(
        frozen=True, extra="ignore", populate_by_name=True
    )

    schema_name: str = Field(alias="schema", min_length=1)
    created: date | None = None

    def to_yaml_dict(self) -> dict[str, object]:
        data: dict[str, object] = {"schema": self.schema_name}
        if self.created is not None:
            data["created"] = self.created
        return data


def get_metadata_path(change_dir: Path) -> Path:
    return Path(change_dir) / METADATA_FILE_NAME


def _check_schema_exists(
    schema_name: str, project_root: Path | None, path: Path, fs: FileSystem
) -> None:
    available = list_schemas(project_root, fs=fs)
    if schema_name not in available:
        msg = f"Unknown schema '{schema_name}'. Available: {', '.join(available)}"
        raise ChangeMetadataError(msg, path=path)


def read_change_metadata(
    change_dir: Path,
    project_root: Path | None = None,
    *,
    fs: FileSystem | None = None,
) -> ChangeMetadata | None:
    """Read and validate a change's metadata file.

    Returns:
        The metadata, or None if the change has no metadata file.

    Raises:
        ChangeMetadataError: If the file is unreadable, not valid YAML, has
            the wrong shape or names a schema that does not exist.
    """
    fs = fs if fs is not None else LocalFileSystem()
    path = get_metadata_path(change_dir)
    if not fs.is_file(path):
        return None

    try:
        content = fs.read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Failed to read metadata: {e}"
        raise ChangeMetadataError(msg, path=path, cause=e) from e

    try:
        raw = yaml.safe_load(content)
    except yaml.YAMLError as e:
        msg = f"Invalid YAML in metadata file: {e}"
        raise ChangeMetadataError(msg, path=path, cause=e) from e

    try:
        metadata = ChangeMetadata.model_validate(raw)
    except ValidationError as e:
        detail = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        )
        msg = f"Invalid metadata: {detail}"
        raise ChangeMetadataError(msg, path=path, cause=e) from e

    _check_schema_exists(metadata.schema_name, project_root, path, fs)
    return metadata


def write_change_metadata(
    change_dir: Path,
    metadata: ChangeMetadata,
    project_root: Path | None = None,
) -> Path:
    """Write ``.openspec.yaml`` into an existing change directory.

    Raises:
        ChangeMetadataError: If the schema does not exist or the write fails.
    """
    path = get_metadata_path(change_dir)
    _check_schema_exists(metadata.schema_name, project_root, path, LocalFileSystem())

    content = yaml.safe_dump(metadata.to_yaml_dict(), default_flow_style=False, sort_keys=False)
    try:
        _ = path.write_text(content, encoding="utf-8")
    except OSError as e:
        msg = f"Failed to write metadata: {e}"
        raise ChangeMetadataError(msg, path=path, cause=e) from e
    return path


def resolve_schema_for_change(
    change_dir: Path,
    explicit_schema: str | None = None,
    *,
    project_root: Path | None = None,
    fs: FileSystem | None = None,
    diagnostics: DiagnosticsCollector | None = None,
) -> str:
    """Choose the schema for a change.

    Precedence: ``explicit_schema``, then the change's metadata, then the
    project config's ``schema``, then ``spec-driven``. Invalid metadata is
    reported to ``diagnostics`` and skipped.

    Args:
        change_dir: The change directory.
        explicit_schema: Schema passed on the command line, if any.
        project_root: Project root; derived from ``change_dir`` if omitted.
        fs: Filesystem to read from.
        diagnostics: Collector for non-fatal problems.
    """
    if explicit_schema:
        return explicit_schema

    fs = fs if fs is not None else LocalFileSystem()
    change_dir = Path(change_dir)
    root = Path(project_root) if project_root is not None else change_dir.parents[2]

    try:
        metadata = read_change_metadata(change_dir, root, fs=fs)
    except ChangeMetadataError as e:
        metadata = None
        if diagnostics is not None:
            _ = diagnostics.warn(DiagnosticKind.INVALID_FIELD, str(e), field="schema")
    if metadata is not None:
        return metadata.schema_name

    config, found = read_project_config(root, fs=fs)
    if diagnostics is not None:
        diagnostics.extend(found)
    if config is not None and config.schema_name:
        return config.schema_name

    return DEFAULT_SCHEMA
