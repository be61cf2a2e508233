from collections.abc import Callable

import pytest
from rich.console import Console

from openspec.cli import CLIContext, create_app


@pytest.fixture(autouse=True)
def _reset_cli_context() -> None:
    CLIContext.reset()


@pytest.fixture
def openspec_cli(console: Console) -> Callable[..., int]:
    """Create the CLI app for testing and return a runner.

    The runner invokes the meta app, so global options such as
    ``--project-root`` are honored, and returns the exit code (0 if the
    command did not raise SystemExit).
    """

    app = create_app(console=console, error_console=console)

    def _run(*args: str) -> int:
        try:
            app.meta(list(args))
        except SystemExit as e:
            return e.code if isinstance(e.code, int) else 1
        else:
            return 0

    return _run
