# pyright: reportUnusedCallResult=false
# ruff: noqa: D415
"""Fork subcommand: copy a schema into the project for customization."""

from typing import Annotated, Any, Never

from cyclopts import Parameter

from openspec.artifact_graph import fork_schema
from openspec.cli._commands._context import CLIContext
from openspec.cli._commands._shared import (
    ExitCode,
    exit_code_for_exception,
    exit_with_error,
    format_json,
    get_project_root,
)
from openspec.exceptions import SchemaError, SchemaNotFoundError

from ._app import app


def _fail_json(error: SchemaError, **extra: Any) -> Never:
    print(format_json({"forked": False, "error": str(error), **extra}))
    raise SystemExit(exit_code_for_exception(error))


@app.command(name="fork")
def fork(
    source: str,
    name: str | None = None,
    /,
    *,
    force: Annotated[
        bool,
        Parameter(name="--force", negative="", help="Overwrite an existing destination"),
    ] = False,
    json_: Annotated[
        bool,
        Parameter(name="--json", negative="", help="Output as JSON"),
    ] = False,
) -> None:
    """Copy an existing schema into the project for customization

    Exit codes:
        0: Schema forked
        2: Invalid name or destination already exists
        3: Source schema not found

    Args:
        source: Schema to copy, from any tier.
        name: Name of the project copy (default: ``<source>-custom``).
        force: Replace an existing project schema with that name.
        json_: Emit the result as JSON.
    """
    ctx = CLIContext.get_current()
    project_root = get_project_root()

    try:
        forked = fork_schema(source, project_root, name, force=force, logger=ctx.logger)
    except SchemaNotFoundError as e:
        if json_:
            _fail_json(e, available=list(e.available))
        exit_with_error(str(e), ExitCode.NOT_FOUND)
    except SchemaError as e:
        if json_:
            _fail_json(e)
        exit_with_error(str(e), exit_code_for_exception(e))
    except OSError as e:
        exit_with_error(f"Failed to fork schema '{source}': {e}", ExitCode.IO_ERROR)

    if json_:
        print(format_json(forked.to_dict()))
        return

    print(f"Forked '{forked.source}' to '{forked.destination}'")
    print(f"Source: {forked.source_path} ({forked.source_location.value})")
    print(f"Destination: {forked.destination_path}")
    if not ctx.quiet:
        print(f"Customize the schema at {forked.destination_path / 'schema.yaml'}")
