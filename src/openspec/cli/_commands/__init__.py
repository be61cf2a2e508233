"""OpenSpec CLI commands."""
# pyright: reportUnusedCallResult=false

from __future__ import annotations

from typing import TYPE_CHECKING

from ._context import CLIContext
from ._instructions import app as instructions_app
from ._new import app as new_app
from ._schema import app as schema_app
from ._schemas import schemas
from ._shared import (
    ExitCode,
    FormattableData,
    exit_code_for_exception,
    exit_with_error,
    format_json,
    format_table,
    get_error_console,
    get_project_root,
    print_diagnostics,
)
from ._status import status
from ._templates import templates

if TYPE_CHECKING:
    from cyclopts import App

__all__ = [
    "CLIContext",
    "ExitCode",
    "FormattableData",
    "exit_code_for_exception",
    "exit_with_error",
    "format_json",
    "format_table",
    "get_error_console",
    "get_project_root",
    "instructions_app",
    "new_app",
    "print_diagnostics",
    "register_commands",
    "schema_app",
]


def register_commands(app: App) -> None:
    app.command(status, name="status")
    app.command(instructions_app)
    app.command(templates, name="templates")
    app.command(schemas, name="schemas")
    app.command(new_app)
    app.command(schema_app)
