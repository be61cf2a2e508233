# pyright: reportUnusedCallResult=false
# ruff: noqa: D415
"""Status command: artifact completion for a change."""

from typing import Annotated

from cyclopts import Parameter

from openspec.artifact_graph import format_change_status, load_change_context
from openspec.changes import require_change
from openspec.exceptions import ChangeError, SchemaError

from ._context import CLIContext
from ._formatters import format_change_status_text
from ._shared import exit_code_for_exception, exit_with_error, format_json, get_project_root


def status(
    *,
    change: Annotated[
        str | None,
        Parameter(name=["--change", "-c"], help="Change name"),
    ] = None,
    schema: Annotated[
        str | None,
        Parameter(name=["--schema", "-s"], help="Override the change's schema"),
    ] = None,
    json_: Annotated[
        bool,
        Parameter(name="--json", negative="", help="Output as JSON"),
    ] = False,
) -> None:
    """Show artifact completion status for a change

    Args:
        change: Name of the change under ``openspec/changes/``.
        schema: Schema to use instead of the change's own.
        json_: Emit the status as JSON.
    """
    ctx = CLIContext.get_current()
    project_root = get_project_root()

    try:
        change_dir = require_change(project_root, change)
        context = load_change_context(
            project_root,
            change_dir.name,
            schema,
            diagnostics=ctx.diagnostics,
            logger=ctx.logger,
        )
    except (ChangeError, SchemaError) as e:
        exit_with_error(str(e), exit_code_for_exception(e))

    change_status = format_change_status(context)
    if ctx.logger is not None:
        ctx.logger.info(
            "status_computed",
            change=change_status.change_name,
            schema=change_status.schema_name,
            complete=change_status.is_complete,
        )

    if json_:
        print(format_json(change_status.to_dict()))
        return

    print(format_change_status_text(change_status))
