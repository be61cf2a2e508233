# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# ruff: noqa: D415
"""Instructions commands: enriched guidance for the next artifact or apply phase."""

from typing import Annotated

from cyclopts import App, Parameter

from openspec.artifact_graph import (
    generate_apply_instructions,
    generate_instructions,
    load_change_context,
)
from openspec.changes import require_change
from openspec.exceptions import (
    ArtifactNotFoundError,
    ChangeError,
    SchemaError,
    TemplateLoadError,
)

from ._context import CLIContext
from ._formatters import (
    format_apply_instructions_text,
    format_artifact_instructions_text,
)
from ._shared import (
    ExitCode,
    exit_code_for_exception,
    exit_with_error,
    format_json,
    get_project_root,
)

app = App(
    name="instructions",
    help="Output enriched instructions for creating an artifact",
    help_on_error=True,
)


@app.default
def artifact_instructions(
    artifact: str | None = None,
    /,
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
    """Output instructions for creating an artifact

    Args:
        artifact: Artifact id from the change's schema.
        change: Name of the change under ``openspec/changes/``.
        schema: Schema to use instead of the change's own.
        json_: Emit the instructions as JSON.
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
        if not artifact:
            valid_ids = ", ".join(context.graph.get_build_order())
            exit_with_error(
                f"Missing required argument <artifact>. Valid artifacts: {valid_ids}",
                ExitCode.VALIDATION_ERROR,
            )
        instructions = generate_instructions(context, artifact, project_root)
    except (ChangeError, SchemaError, ArtifactNotFoundError, TemplateLoadError) as e:
        exit_with_error(str(e), exit_code_for_exception(e))

    if ctx.logger is not None:
        ctx.logger.info(
            "instructions_generated",
            change=instructions.change_name,
            artifact=instructions.artifact_id,
            blocked=instructions.is_blocked,
        )

    if json_:
        print(format_json(instructions.to_dict()))
        return

    print(format_artifact_instructions_text(instructions))


@app.command(name="apply")
def apply_instructions(
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
    """Output apply-phase state and instructions for a change

    Args:
        change: Name of the change under ``openspec/changes/``.
        schema: Schema to use instead of the change's own.
        json_: Emit the apply instructions as JSON.
    """
    ctx = CLIContext.get_current()
    project_root = get_project_root()

    try:
        change_dir = require_change(project_root, change)
        instructions = generate_apply_instructions(
            project_root,
            change_dir.name,
            schema,
            diagnostics=ctx.diagnostics,
            logger=ctx.logger,
        )
    except (ChangeError, SchemaError) as e:
        exit_with_error(str(e), exit_code_for_exception(e))
    except OSError as e:
        exit_with_error(f"Failed to read tracking file: {e}", ExitCode.IO_ERROR)

    if ctx.logger is not None:
        ctx.logger.info(
            "apply_instructions_generated",
            change=instructions.change_name,
            state=instructions.state.value,
        )

    if json_:
        print(format_json(instructions.to_dict()))
        return

    print(format_apply_instructions_text(instructions))
