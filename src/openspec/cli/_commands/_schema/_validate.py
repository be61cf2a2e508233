# pyright: reportUnusedCallResult=false
# ruff: noqa: D415
"""Validate subcommand: check schema structure and template presence."""

from pathlib import Path
from typing import Annotated, Any

from cyclopts import Parameter

from openspec.artifact_graph import (
    SCHEMA_FILE_NAMES,
    LocalFileSystem,
    SchemaIssue,
    get_schema_dir,
    schema_not_found,
    validate_schema_dir,
)
from openspec.cli._commands._context import CLIContext
from openspec.cli._commands._shared import (
    ExitCode,
    exit_with_error,
    format_json,
    get_project_root,
)
from openspec.config import get_project_schemas_dir

from ._app import app


def _project_schema_dirs(project_root: Path) -> list[Path]:
    fs = LocalFileSystem()
    schemas_dir = get_project_schemas_dir(project_root)
    if not fs.is_dir(schemas_dir):
        return []
    return [
        schemas_dir / entry.name
        for entry in fs.iter_dir(schemas_dir)
        if entry.is_dir
        and any(fs.is_file(schemas_dir / entry.name / n) for n in SCHEMA_FILE_NAMES)
    ]


def _result_to_dict(name: str, schema_dir: Path, issues: list[SchemaIssue]) -> dict[str, Any]:
    return {
        "name": name,
        "path": str(schema_dir),
        "valid": not issues,
        "issues": [issue.to_dict() for issue in issues],
    }


def _validate_all(project_root: Path, *, json_: bool) -> None:
    schema_dirs = _project_schema_dirs(project_root)
    results = [
        _result_to_dict(schema_dir.name, schema_dir, validate_schema_dir(schema_dir))
        for schema_dir in schema_dirs
    ]
    all_valid = all(result["valid"] for result in results)

    if json_:
        print(format_json({"valid": all_valid, "schemas": results}))
    elif not results:
        print("No schemas found in project.")
    else:
        print("Validation Results:")
        for result in results:
            mark = "✓" if result["valid"] else "✗"
            print(f"  {mark} {result['name']}")
            for issue in result["issues"]:
                print(f"    {issue['level']}: {issue['message']}")

    if not all_valid:
        raise SystemExit(ExitCode.VALIDATION_ERROR)


@app.command(name="validate")
def validate(
    name: str | None = None,
    /,
    *,
    json_: Annotated[
        bool,
        Parameter(name="--json", negative="", help="Output as JSON"),
    ] = False,
) -> None:
    """Validate a schema's structure and templates

    Without a name, every schema in the project's ``openspec/schemas/``
    directory is validated.

    Exit codes:
        0: Schema valid
        2: Validation errors found
        3: Schema not found

    Args:
        name: Schema name to validate.
        json_: Emit the validation result as JSON.
    """
    ctx = CLIContext.get_current()
    project_root = get_project_root()

    if not name:
        _validate_all(project_root, json_=json_)
        return

    schema_dir = get_schema_dir(name, project_root)
    if schema_dir is None:
        error = schema_not_found(name, project_root)
        if json_:
            print(
                format_json(
                    {
                        "valid": False,
                        "error": str(error),
                        "available": list(error.available),
                    }
                )
            )
            raise SystemExit(ExitCode.NOT_FOUND)
        exit_with_error(str(error), ExitCode.NOT_FOUND)

    issues = validate_schema_dir(schema_dir)
    if ctx.logger is not None:
        ctx.logger.info("schema_validated", schema=name, issues=len(issues))

    if json_:
        print(format_json(_result_to_dict(name, schema_dir, issues)))
    elif not issues:
        print(f"✓ Schema '{name}' is valid")
    else:
        print(f"✗ Schema '{name}' has errors:")
        for issue in issues:
            print(f"  {issue.level.value}: {issue.message}")

    if issues:
        raise SystemExit(ExitCode.VALIDATION_ERROR)
