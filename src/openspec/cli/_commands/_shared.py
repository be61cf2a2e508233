# pyright: reportExplicitAny=false
"""Shared CLI utilities for commands.

This module provides common utilities used across CLI command implementations:
- Standardized exit codes and the exception to exit code mapping
- Generic output formatters (JSON, table)
- Console utilities for error and warning output
- Project root resolution from the global ``--project-root`` option
"""

from __future__ import annotations

from enum import IntEnum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Never

from rich.markup import escape

from ._context import CLIContext

if TYPE_CHECKING:
    from rich.console import Console

    from openspec.diagnostics import DiagnosticsCollector

# Type alias for formattable data - uses Any to match library signatures
FormattableData = dict[str, Any] | list[Any]

__all__ = [
    "ExitCode",
    "FormattableData",
    "exit_code_for_exception",
    "exit_with_error",
    "format_json",
    "format_table",
    "get_error_console",
    "get_project_root",
    "print_diagnostics",
]


class ExitCode(IntEnum):
    """Standard exit codes for OpenSpec CLI commands."""

    SUCCESS = 0
    LOAD_ERROR = 1
    VALIDATION_ERROR = 2
    NOT_FOUND = 3
    IO_ERROR = 4
    INTERNAL_ERROR = 5


def exit_code_for_exception(exc: BaseException) -> ExitCode:
    """Map an exception to the appropriate exit code.

    Args:
        exc: The exception to map.

    Returns:
        Exit code corresponding to the exception type.
    """
    from openspec.exceptions import (  # noqa: PLC0415
        ArtifactNotFoundError,
        ChangeExistsError,
        ChangeMetadataError,
        ChangeNotFoundError,
        ConfigError,
        InvalidChangeNameError,
        InvalidSchemaNameError,
        SchemaExistsError,
        SchemaLoadError,
        SchemaNotFoundError,
        SchemaValidationError,
        TemplateLoadError,
    )

    # Not found errors
    if isinstance(exc, (SchemaNotFoundError, ArtifactNotFoundError, ChangeNotFoundError)):
        return ExitCode.NOT_FOUND

    # Validation errors
    if isinstance(
        exc,
        (
            SchemaValidationError,
            InvalidChangeNameError,
            InvalidSchemaNameError,
            ChangeExistsError,
            SchemaExistsError,
            ValueError,
        ),
    ):
        return ExitCode.VALIDATION_ERROR

    # Load errors
    if isinstance(
        exc, (SchemaLoadError, TemplateLoadError, ChangeMetadataError, ConfigError)
    ):
        return ExitCode.LOAD_ERROR

    if isinstance(exc, OSError):
        return ExitCode.IO_ERROR

    return ExitCode.INTERNAL_ERROR


def format_json(data: FormattableData, *, indent: bool = True) -> str:
    """Format data as JSON.

    Args:
        data: Dictionary or list to format as JSON.
        indent: Whether to pretty-print with indentation.

    Returns:
        JSON-formatted string representation.
    """
    import orjson  # noqa: PLC0415

    options = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(data, option=options).decode("utf-8")


def format_table(headers: list[str], rows: list[list[str]]) -> str:
    """Format data as a Markdown table.

    Args:
        headers: Column headers for the table.
        rows: List of rows, where each row is a list of cell values.

    Returns:
        Markdown table string representation.
    """
    from pytablewriter import MarkdownTableWriter  # noqa: PLC0415

    writer = MarkdownTableWriter(
        headers=headers,
        value_matrix=rows,
        margin=1,
    )
    return writer.dumps()


def get_error_console() -> Console:
    """Get a Rich console configured for error output to stderr.

    Honors ``--no-color`` from the current CLI context.
    """
    from rich.console import Console  # noqa: PLC0415

    ctx = CLIContext.get_current()
    return Console(stderr=True, no_color=ctx.no_color, highlight=False)


def get_project_root() -> Path:
    """Resolve the project root for the current invocation.

    Uses ``--project-root`` when given, else the nearest ancestor of the
    working directory containing ``openspec/``, else the working directory.
    """
    from openspec.config import resolve_project_root  # noqa: PLC0415

    ctx = CLIContext.get_current()
    return resolve_project_root(ctx.project_root)


def print_diagnostics(
    diagnostics: DiagnosticsCollector,
    *,
    console: Console | None = None,
) -> None:
    """Print every collected diagnostic to stderr as a warning."""
    if not diagnostics:
        return
    if console is None:
        console = get_error_console()
    for diagnostic in diagnostics:
        console.print(
            f"[yellow]Warning:[/yellow] {escape(diagnostic.detail)}", soft_wrap=True
        )


def exit_with_error(
    message: str,
    code: ExitCode = ExitCode.INTERNAL_ERROR,
    *,
    console: Console | None = None,
) -> Never:
    """Print an error message and exit with the specified code.

    Args:
        message: The error message to display.
        code: The exit code to use (defaults to INTERNAL_ERROR).
        console: Optional Rich console for output. If not provided,
            a new stderr console will be created.

    Raises:
        SystemExit: Always raised with the specified exit code.
    """
    if console is None:
        console = get_error_console()

    console.print(f"[red]Error:[/red] {escape(message)}", soft_wrap=True)
    raise SystemExit(code)
