# pyright: reportUnusedCallResult=false
# ruff: noqa: D415
"""Init subcommand: create a new project-local schema."""

from typing import Annotated, Any, Never

from cyclopts import Parameter

from openspec.artifact_graph import init_schema
from openspec.cli._commands._context import CLIContext
from openspec.cli._commands._shared import (
    ExitCode,
    exit_code_for_exception,
    exit_with_error,
    format_json,
    get_project_root,
)
from openspec.exceptions import (
    ArtifactNotFoundError,
    ConfigError,
    OpenSpecError,
    SchemaError,
)

from ._app import app


def _fail_json(error: OpenSpecError, **extra: Any) -> Never:
    print(format_json({"created": False, "error": str(error), **extra}))
    raise SystemExit(exit_code_for_exception(error))


def _split_artifacts(value: str | None) -> list[str] | None:
    if value is None:
        return None
    return [part.strip() for part in value.split(",")]


@app.command(name="init")
def init(
    name: str,
    /,
    *,
    description: Annotated[
        str | None,
        Parameter(name=["--description", "-d"], help="Schema description"),
    ] = None,
    artifacts: Annotated[
        str | None,
        Parameter(
            name="--artifacts",
            help="Comma-separated artifact ids (proposal,specs,design,tasks)",
        ),
    ] = None,
    default: Annotated[
        bool,
        Parameter(name="--default", negative="", help="Set as the project default schema"),
    ] = False,
    force: Annotated[
        bool,
        Parameter(name="--force", negative="", help="Overwrite an existing schema"),
    ] = False,
    json_: Annotated[
        bool,
        Parameter(name="--json", negative="", help="Output as JSON"),
    ] = False,
) -> None:
    """Create a new project-local schema

    The schema is built from the packaged starter artifacts and written to
    ``openspec/schemas/<name>/`` with a template for each artifact.

    Exit codes:
        0: Schema created
        1: Project config could not be updated
        2: Invalid name or schema already exists
        3: Unknown artifact id

    Args:
        name: Kebab-case schema name.
        description: Schema description.
        artifacts: Comma-separated starter artifact ids; defaults to all.
        default: Record the schema as the project default in
            ``openspec/config.yaml``.
        force: Replace an existing project schema with that name.
        json_: Emit the result as JSON.
    """
    ctx = CLIContext.get_current()
    project_root = get_project_root()

    try:
        created = init_schema(
            name,
            project_root,
            description=description,
            artifacts=_split_artifacts(artifacts),
            set_default=default,
            force=force,
            logger=ctx.logger,
        )
    except ArtifactNotFoundError as e:
        if json_:
            _fail_json(e, valid=list(e.valid_ids))
        exit_with_error(str(e), ExitCode.NOT_FOUND)
    except (SchemaError, ConfigError) as e:
        if json_:
            _fail_json(e)
        exit_with_error(str(e), exit_code_for_exception(e))
    except OSError as e:
        exit_with_error(f"Failed to create schema '{name}': {e}", ExitCode.IO_ERROR)

    if json_:
        print(format_json(created.to_dict()))
        return

    print(f"Created schema '{created.name}' at {created.path}")
    print(f"Artifacts: {', '.join(created.artifacts)}")
    if created.set_as_default:
        print("Set as project default schema.")
    if not ctx.quiet:
        print(f"Use it with: openspec new change <name> --schema {created.name}")
