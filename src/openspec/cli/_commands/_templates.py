# pyright: reportUnusedCallResult=false
# ruff: noqa: D415
"""Templates command: where each artifact's template is loaded from."""

from typing import Annotated

from cyclopts import Parameter

from openspec.artifact_graph import DEFAULT_SCHEMA, ArtifactGraph, find_schema, resolve_schema
from openspec.exceptions import SchemaError

from ._context import CLIContext
from ._formatters import format_templates_table
from ._shared import exit_code_for_exception, exit_with_error, format_json, get_project_root


def templates(
    *,
    schema: Annotated[
        str,
        Parameter(name=["--schema", "-s"], help="Schema to inspect"),
    ] = DEFAULT_SCHEMA,
    json_: Annotated[
        bool,
        Parameter(name="--json", negative="", help="Output as JSON"),
    ] = False,
) -> None:
    """Show resolved template paths for every artifact in a schema

    Args:
        schema: Schema name.
        json_: Emit ``{artifact: {path, source}}`` as JSON.
    """
    ctx = CLIContext.get_current()
    project_root = get_project_root()

    try:
        resolved = resolve_schema(schema, project_root, logger=ctx.logger)
    except SchemaError as e:
        exit_with_error(str(e), exit_code_for_exception(e))

    location = find_schema(schema, project_root)
    if location is None:
        exit_with_error(f"Schema '{schema}' not found")

    graph = ArtifactGraph.from_schema(resolved)
    paths = {
        artifact.id: str(location.schema_dir / "templates" / artifact.template)
        for artifact in graph.get_all_artifacts()
    }

    if json_:
        data = {
            artifact_id: {"path": path, "source": location.source.value}
            for artifact_id, path in paths.items()
        }
        print(format_json(data))
        return

    print(f"Schema: {resolved.name}")
    print(f"Source: {location.source.value}")
    print()
    print(format_templates_table(paths))
