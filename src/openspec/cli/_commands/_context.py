# pyright: reportUnusedCallResult=false
# ruff: noqa: TC003  # Path needed at runtime for dataclass field
"""CLI context for global state management.

The CLIContext is set once at CLI startup and made available to all
commands via contextvars, so global options, the logger and the
invocation's diagnostics collector never have to be threaded through
command signatures.
"""

from __future__ import annotations

import contextvars
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from openspec.diagnostics import DiagnosticsCollector

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger


# Thread-safe context variable for CLIContext
_current_cli_context: contextvars.ContextVar[CLIContext | None] = (
    contextvars.ContextVar("cli_context", default=None)
)


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Global CLI context with options and per-invocation state.

    Attributes:
        project_root: Explicit project root from ``--project-root``, or None
            to discover it from the working directory.
        verbose: Enable verbose output with additional details.
        quiet: Suppress non-essential output (including warnings).
        no_color: Disable colored output.
        logger: Structured logger for CLI commands (writes to file only).
        diagnostics: Warn-once collector shared by every engine call made
            during this invocation.
    """

    project_root: Path | None = None
    verbose: bool = False
    quiet: bool = False
    no_color: bool = False
    logger: FilteringBoundLogger | None = field(default=None, repr=False)
    diagnostics: DiagnosticsCollector = field(
        default_factory=DiagnosticsCollector, repr=False
    )

    @classmethod
    def get_current(cls) -> CLIContext:
        """Get current active CLIContext, or create a default if not set.

        Returns:
            The currently active CLIContext, or a default instance if none is set.
        """
        ctx = _current_cli_context.get()
        if ctx is not None:
            return ctx
        return cls()

    @classmethod
    def set_current(cls, ctx: CLIContext) -> None:
        """Set the current active CLIContext.

        Args:
            ctx: The CLIContext to set as current.
        """
        _current_cli_context.set(ctx)

    @classmethod
    def reset(cls) -> None:
        """Reset to default context.

        This is primarily useful for testing to ensure a clean state between tests.
        """
        _current_cli_context.set(None)
