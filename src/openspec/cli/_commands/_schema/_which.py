# pyright: reportUnusedCallResult=false
# ruff: noqa: D415
"""Which subcommand: show where a schema resolves from."""

from typing import Annotated

from cyclopts import Parameter

from openspec.artifact_graph import (
    get_schema_resolution,
    list_schema_resolutions,
    schema_not_found,
)
from openspec.cli._commands._formatters import (
    format_schema_resolution_text,
    format_schema_resolutions_text,
)
from openspec.cli._commands._shared import (
    ExitCode,
    exit_with_error,
    format_json,
    get_project_root,
)

from ._app import app


@app.command(name="which")
def which(
    name: str | None = None,
    /,
    *,
    all_: Annotated[
        bool,
        Parameter(name=["--all", "-a"], negative="", help="List every schema"),
    ] = False,
    json_: Annotated[
        bool,
        Parameter(name="--json", negative="", help="Output as JSON"),
    ] = False,
) -> None:
    """Show which tier a schema resolves from

    Lists lower-precedence definitions the active one shadows.

    Args:
        name: Schema name.
        all_: List the resolution of every schema, grouped by tier.
        json_: Emit the resolution as JSON.
    """
    project_root = get_project_root()

    if all_:
        resolutions = list_schema_resolutions(project_root)
        if json_:
            print(format_json([r.to_dict() for r in resolutions]))
        else:
            print(format_schema_resolutions_text(resolutions))
        return

    if not name:
        exit_with_error(
            "Schema name is required (or use --all to list all schemas)",
            ExitCode.VALIDATION_ERROR,
        )

    resolution = get_schema_resolution(name, project_root)
    if resolution is None:
        error = schema_not_found(name, project_root)
        if json_:
            print(format_json({"error": str(error), "available": list(error.available)}))
            raise SystemExit(ExitCode.NOT_FOUND)
        exit_with_error(str(error), ExitCode.NOT_FOUND)

    if json_:
        print(format_json(resolution.to_dict()))
        return

    print(format_schema_resolution_text(resolution))
