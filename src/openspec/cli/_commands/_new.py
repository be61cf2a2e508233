# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# ruff: noqa: D415
"""Commands for creating workflow items."""

from typing import Annotated

from cyclopts import App, Parameter

from openspec.changes import create_change
from openspec.exceptions import ChangeError, SchemaError

from ._context import CLIContext
from ._shared import (
    ExitCode,
    exit_code_for_exception,
    exit_with_error,
    get_error_console,
    get_project_root,
)

app = App(name="new", help="Create new workflow items", help_on_error=True)


@app.command(name="change")
def new_change(
    name: str,
    /,
    *,
    schema: Annotated[
        str | None,
        Parameter(name=["--schema", "-s"], help="Workflow schema for the change"),
    ] = None,
    description: Annotated[
        str | None,
        Parameter(name=["--description", "-d"], help="Description written to README.md"),
    ] = None,
) -> None:
    """Create a new change directory

    Args:
        name: Kebab-case change name.
        schema: Schema to record in ``.openspec.yaml``; defaults to the
            project config's schema, then ``spec-driven``.
        description: Optional description written to the change's README.md.
    """
    ctx = CLIContext.get_current()
    project_root = get_project_root()

    try:
        created = create_change(
            project_root,
            name,
            schema,
            description=description,
            diagnostics=ctx.diagnostics,
            logger=ctx.logger,
        )
    except (ChangeError, SchemaError) as e:
        exit_with_error(str(e), exit_code_for_exception(e))
    except OSError as e:
        exit_with_error(f"Failed to create change '{name}': {e}", ExitCode.IO_ERROR)

    if not ctx.quiet:
        relative = created.change_dir.relative_to(project_root)
        get_error_console().print(
            f"[green]Created change[/green] '{created.name}' at {relative}/ "
            f"(schema: {created.schema_name})",
            soft_wrap=True,
        )
