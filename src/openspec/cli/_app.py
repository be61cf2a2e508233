"""The command-line interface for OpenSpec."""
# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console

from openspec import __version__
from openspec.config import LoggingConfig, LogLevel
from openspec.diagnostics import DiagnosticsCollector
from openspec.utils import create_cli_logger, create_null_logger

from ._commands import register_commands
from ._commands._context import CLIContext
from ._commands._shared import print_diagnostics

_HELP = "Spec-driven workflow engine for AI coding agents."


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    """Build the ``openspec`` application.

    Global options are handled by the meta app, so entrypoints should invoke
    ``app.meta(...)``; calling the app directly runs commands with a default
    CLI context.

    Args:
        console: Console for help and regular cyclopts output.
        error_console: Console for cyclopts parse errors.
        exit_on_error: Whether cyclopts exits on parse errors.
    """
    if console is None:
        console = Console()
    if error_console is None:
        error_console = Console(stderr=True)
    app = App(
        name="openspec",
        help=_HELP,
        version=__version__,
        help_on_error=True,
        console=console,
        error_console=error_console,
        exit_on_error=exit_on_error,
    )

    @app.meta.default
    def _default(  # pyright: ignore[reportUnusedFunction]
        *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
        project_root: Annotated[
            Path | None, Parameter(name="--project-root", help="Path to project root")
        ] = None,
        verbose: Annotated[bool, Parameter(help="Enable verbose output")] = False,
        quiet: Annotated[bool, Parameter(help="Suppress non-essential output")] = False,
        no_color: Annotated[
            bool, Parameter(name="--no-color", help="Disable colored output")
        ] = False,
    ) -> None:
        """Launch OpenSpec CLI with global options.

        Args:
            tokens: Command tokens to pass to subcommands.
            project_root: Project root directory (default: nearest ancestor
                containing ``openspec/``).
            verbose: Log at debug level.
            quiet: Suppress non-essential output, including warnings.
            no_color: Disable colored output.
        """
        settings = LoggingConfig.from_env()
        level = LogLevel.DEBUG if verbose else settings.level

        # Logging must never stop a command from running
        try:
            cli_logger = create_cli_logger(
                level=level.value,
                log_format=settings.format.value,  # type: ignore[arg-type]
                log_file=settings.file,
                command=tokens[0] if tokens else "",
            )
        except OSError:
            cli_logger = create_null_logger()

        diagnostics = DiagnosticsCollector(cli_logger)
        ctx = CLIContext(
            project_root=project_root,
            verbose=verbose,
            quiet=quiet,
            no_color=no_color,
            logger=cli_logger,
            diagnostics=diagnostics,
        )
        CLIContext.set_current(ctx)

        try:
            app(tokens)
        finally:
            if not quiet:
                print_diagnostics(diagnostics)
            CLIContext.reset()

    register_commands(app)
    return app


def main() -> None:
    """Default entrypoint for the `openspec` CLI."""
    app = create_app()
    app.meta()


if __name__ == "__main__":
    main()
