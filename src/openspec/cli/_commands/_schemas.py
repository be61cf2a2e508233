# pyright: reportUnusedCallResult=false
# ruff: noqa: D415
"""Schemas command: list every resolvable workflow schema."""

from typing import Annotated

from cyclopts import Parameter

from openspec.artifact_graph import list_schemas_with_info

from ._context import CLIContext
from ._formatters import format_schemas_table
from ._shared import format_json, get_project_root


def schemas(
    *,
    json_: Annotated[
        bool,
        Parameter(name="--json", negative="", help="Output as JSON"),
    ] = False,
) -> None:
    """List available workflow schemas

    Invalid schema files are skipped.

    Args:
        json_: Emit the schema list as JSON.
    """
    ctx = CLIContext.get_current()
    infos = list_schemas_with_info(get_project_root(), logger=ctx.logger)

    if json_:
        print(format_json([info.to_dict() for info in infos]))
        return

    if not infos:
        print("No schemas found.")
        return

    print(format_schemas_table(infos))
