"""Schema directory validation.

Checks a schema directory as a whole: the schema file must exist and parse,
and every artifact's template must be present under ``templates/`` or the
schema root.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

from openspec.exceptions import SchemaError

from ._filesystem import LocalFileSystem
from ._schema import parse_schema

if TYPE_CHECKING:
    from ._filesystem import FileSystem


class IssueLevel(StrEnum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True, slots=True)
class SchemaIssue:
    """A single problem found in a schema directory.

    Attributes:
        level: Issue severity.
        path: Location within the schema (file name or dotted field path).
        message: Human-readable description.
    """

    level: IssueLevel
    path: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"level": self.level.value, "path": self.path, "message": self.message}


def _schema_file(schema_dir: Path, fs: FileSystem) -> Path | None:
    for name in ("schema.yaml", "schema.yml"):
        candidate = schema_dir / name
        if fs.is_file(candidate):
            return candidate
    return None


def validate_schema_dir(schema_dir: Path, *, fs: FileSystem | None = None) -> list[SchemaIssue]:
    """Validate a schema directory.

    Returns:
        Every issue found; an empty list means the schema is valid.
    """
    fs = fs if fs is not None else LocalFileSystem()
    schema_dir = Path(schema_dir)

    schema_file = _schema_file(schema_dir, fs)
    if schema_file is None:
        return [SchemaIssue(IssueLevel.ERROR, "schema.yaml", "schema.yaml not found")]

    try:
        content = fs.read_text(schema_file)
    except (OSError, UnicodeDecodeError) as e:
        return [
            SchemaIssue(IssueLevel.ERROR, schema_file.name, f"Failed to read file: {e}")
        ]

    try:
        schema = parse_schema(content, path=schema_file)
    except SchemaError as e:
        return [SchemaIssue(IssueLevel.ERROR, schema_file.name, str(e))]

    issues: list[SchemaIssue] = []
    for artifact in schema.artifacts:
        in_templates = schema_dir / "templates" / artifact.template
        in_root = schema_dir / artifact.template
        if not fs.is_file(in_templates) and not fs.is_file(in_root):
            issues.append(
                SchemaIssue(
                    IssueLevel.ERROR,
                    f"artifacts.{artifact.id}.template",
                    f"Template file '{artifact.template}' not found "
                    f"for artifact '{artifact.id}'",
                )
            )
    return issues
