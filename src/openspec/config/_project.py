# pyright: reportAny=false, reportExplicitAny=false
"""Project configuration (``openspec/config.yaml``).

The reader is resilient: each top-level field is validated independently,
and a bad field is dropped with a diagnostic instead of failing the whole
file. A missing file is not an error.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

import yaml
from pydantic import BaseModel, ConfigDict, Field, StrictStr, TypeAdapter, ValidationError

from openspec.diagnostics import Diagnostic, DiagnosticKind
from openspec.exceptions import ConfigError

from ._discovery import get_config_path_candidates

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from openspec.artifact_graph import FileSystem

MAX_CONTEXT_SIZE = 50 * 1024
"""Maximum UTF-8 byte size of the ``context`` field."""

_SCHEMA_FIELD: TypeAdapter[str] = TypeAdapter(StrictStr)
_CONTEXT_FIELD: TypeAdapter[str] = TypeAdapter(StrictStr)
_RULE_LIST: TypeAdapter[list[str]] = TypeAdapter(list[StrictStr])


class ProjectConfig(BaseModel):
    """Validated project configuration.

    Attributes:
        schema_name: Default workflow schema for new and existing changes.
        context: Background text injected into every artifact's instructions.
        rules: Per-artifact rule lists keyed by artifact id. Lists are never
            empty.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(
        frozen=True, extra="ignore", populate_by_name=True
    )

    schema_name: str | None = Field(default=None, alias="schema")
    context: str | None = None
    rules: dict[str, tuple[str, ...]] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.schema_name is None and self.context is None and not self.rules


def _warn(kind: DiagnosticKind, field: str | None, detail: str) -> Diagnostic:
    return Diagnostic(kind=kind, field=field, detail=detail)


def _parse_schema_field(raw: Any, diagnostics: list[Diagnostic]) -> str | None:
    try:
        value = _SCHEMA_FIELD.validate_python(raw)
    except ValidationError:
        value = ""
    if not value:
        diagnostics.append(
            _warn(
                DiagnosticKind.INVALID_FIELD,
                "schema",
                "Invalid 'schema' field in config (must be non-empty string)",
            )
        )
        return None
    return value


def _parse_context_field(raw: Any, diagnostics: list[Diagnostic]) -> str | None:
    try:
        value = _CONTEXT_FIELD.validate_python(raw)
    except ValidationError:
        diagnostics.append(
            _warn(
                DiagnosticKind.INVALID_FIELD,
                "context",
                "Invalid 'context' field in config (must be string)",
            )
        )
        return None

    size = len(value.encode("utf-8"))
    if size > MAX_CONTEXT_SIZE:
        diagnostics.append(
            _warn(
                DiagnosticKind.CONTEXT_TOO_LARGE,
                "context",
                f"Context too large ({size} bytes, limit: {MAX_CONTEXT_SIZE} bytes); "
                "ignoring context field",
            )
        )
        return None
    return value


def _parse_rules_field(
    raw: Any, diagnostics: list[Diagnostic]
) -> dict[str, tuple[str, ...]]:
    if not isinstance(raw, dict):
        diagnostics.append(
            _warn(
                DiagnosticKind.INVALID_FIELD,
                "rules",
                "Invalid 'rules' field in config (must be object)",
            )
        )
        return {}

    rules: dict[str, tuple[str, ...]] = {}
    for key, entries in raw.items():
        artifact_id = str(key)
        try:
            values = _RULE_LIST.validate_python(entries)
        except ValidationError:
            diagnostics.append(
                _warn(
                    DiagnosticKind.INVALID_FIELD,
                    f"rules.{artifact_id}",
                    f"Rules for '{artifact_id}' must be an array of strings, "
                    "ignoring this artifact's rules",
                )
            )
            continue

        kept = tuple(rule for rule in values if rule)
        if len(kept) < len(values):
            diagnostics.append(
                _warn(
                    DiagnosticKind.EMPTY_RULE,
                    f"rules.{artifact_id}",
                    f"Some rules for '{artifact_id}' are empty strings, ignoring them",
                )
            )
        if kept:
            rules[artifact_id] = kept
    return rules


def parse_project_config(
    content: str,
) -> tuple[ProjectConfig | None, list[Diagnostic]]:
    """Parse project config text field by field.

    Returns:
        The config (None when no field survived validation) and the
        diagnostics produced along the way.
    """
    diagnostics: list[Diagnostic] = []
    try:
        raw = yaml.safe_load(content)
    except yaml.YAMLError as e:
        diagnostics.append(
            _warn(
                DiagnosticKind.INVALID_YAML,
                None,
                f"Failed to parse openspec/config.yaml: {e}",
            )
        )
        return None, diagnostics

    if not isinstance(raw, dict):
        diagnostics.append(
            _warn(
                DiagnosticKind.INVALID_YAML,
                None,
                "openspec/config.yaml is not a valid YAML object",
            )
        )
        return None, diagnostics

    values: dict[str, Any] = {}
    if "schema" in raw:
        schema_name = _parse_schema_field(raw["schema"], diagnostics)
        if schema_name is not None:
            values["schema_name"] = schema_name
    if "context" in raw:
        context = _parse_context_field(raw["context"], diagnostics)
        if context is not None:
            values["context"] = context
    if "rules" in raw:
        rules = _parse_rules_field(raw["rules"], diagnostics)
        if rules:
            values["rules"] = rules

    if not values:
        return None, diagnostics
    return ProjectConfig.model_validate(values), diagnostics


def find_project_config(project_root: Path, *, fs: FileSystem | None = None) -> Path | None:
    """Return the project config path (``.yaml`` preferred), or None."""
    from openspec.artifact_graph import LocalFileSystem  # noqa: PLC0415

    fs = fs if fs is not None else LocalFileSystem()
    for candidate in get_config_path_candidates(Path(project_root)):
        if fs.is_file(candidate):
            return candidate
    return None


def read_project_config(
    project_root: Path,
    *,
    fs: FileSystem | None = None,
) -> tuple[ProjectConfig | None, list[Diagnostic]]:
    """Read ``openspec/config.yaml`` (or ``.yml``) from a project root.

    Args:
        project_root: Directory containing ``openspec/``.
        fs: Filesystem to read from; defaults to the local filesystem.

    Returns:
        The parsed config (None when the file is absent, unreadable or has
        no valid fields) and any diagnostics.
    """
    from openspec.artifact_graph import LocalFileSystem  # noqa: PLC0415

    fs = fs if fs is not None else LocalFileSystem()
    path = find_project_config(project_root, fs=fs)
    if path is None:
        return None, []

    try:
        content = fs.read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        return None, [
            _warn(DiagnosticKind.READ_ERROR, None, f"Failed to read {path}: {e}")
        ]
    return parse_project_config(content)


def validate_config_rules(
    rules: Mapping[str, Iterable[str]],
    valid_artifact_ids: Iterable[str],
    schema_name: str,
) -> list[str]:
    """Return one warning per rules key that is not an artifact id.

    Example:
        >>> validate_config_rules({"nope": ["x"]}, {"proposal"}, "spec-driven")
        ['Unknown artifact ID in rules: "nope". Valid IDs for schema "spec-driven": proposal']
    """
    valid = set(valid_artifact_ids)
    valid_list = ", ".join(sorted(valid))
    return [
        f'Unknown artifact ID in rules: "{artifact_id}". '
        f'Valid IDs for schema "{schema_name}": {valid_list}'
        for artifact_id in rules
        if artifact_id not in valid
    ]


def set_default_schema(project_root: Path, schema_name: str) -> Path:
    """Record ``schema_name`` as the project's default schema.

    The existing config file (``.yaml`` preferred) is updated in place and
    its other keys are kept; ``openspec/config.yaml`` is created otherwise.

    Raises:
        ConfigError: If the existing file cannot be read or is not a YAML
            mapping.
        OSError: If the file cannot be written.
    """
    project_root = Path(project_root)
    path = find_project_config(project_root)
    data: dict[str, Any] = {}
    if path is None:
        path = get_config_path_candidates(project_root)[0]
    else:
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            msg = f"Cannot update {path}: {e}"
            raise ConfigError(msg) from e
        if raw is not None and not isinstance(raw, dict):
            msg = f"Cannot update {path}: not a YAML mapping"
            raise ConfigError(msg)
        data = dict(raw or {})

    data["schema"] = schema_name
    path.parent.mkdir(parents=True, exist_ok=True)
    _ = path.write_text(
        yaml.safe_dump(data, default_flow_style=False, sort_keys=False),
        encoding="utf-8",
    )
    return path
