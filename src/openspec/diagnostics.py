"""Non-fatal diagnostics raised while loading configuration and instructions.

Problems with individual project-config fields never abort a command. They
are collected here and rendered by the caller after the command runs. The
collector is owned by a single invocation so that "warn once" semantics hold
per run without any module-level state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from structlog.typing import FilteringBoundLogger


class DiagnosticKind(StrEnum):
    """Category of a diagnostic."""

    INVALID_YAML = "invalid_yaml"
    INVALID_FIELD = "invalid_field"
    UNKNOWN_SCHEMA = "unknown_schema"
    CONTEXT_TOO_LARGE = "context_too_large"
    EMPTY_RULE = "empty_rule"
    UNKNOWN_ARTIFACT_RULE = "unknown_artifact_rule"
    READ_ERROR = "read_error"


class Severity(StrEnum):
    """Diagnostic severity."""

    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A single non-fatal problem.

    Attributes:
        kind: Diagnostic category.
        field: Config field the problem relates to, if any.
        detail: Human-readable message.
        severity: Severity level.
    """

    kind: DiagnosticKind
    field: str | None
    detail: str
    severity: Severity = Severity.WARNING

    def __str__(self) -> str:
        return self.detail


@dataclass(slots=True)
class DiagnosticsCollector:
    """Accumulates diagnostics for one invocation, deduplicating by message.

    Example:
        >>> collector = DiagnosticsCollector()
        >>> collector.add(Diagnostic(DiagnosticKind.EMPTY_RULE, "rules", "x"))
        True
        >>> collector.add(Diagnostic(DiagnosticKind.EMPTY_RULE, "rules", "x"))
        False
    """

    logger: FilteringBoundLogger | None = field(default=None, repr=False)
    _items: list[Diagnostic] = field(default_factory=list)
    _seen: set[str] = field(default_factory=set)

    def add(self, diagnostic: Diagnostic) -> bool:
        """Record a diagnostic unless an identical message was already seen.

        Returns:
            True if the diagnostic was new and recorded.
        """
        if diagnostic.detail in self._seen:
            return False
        self._seen.add(diagnostic.detail)
        self._items.append(diagnostic)
        if self.logger is not None:
            self.logger.warning(
                "config_diagnostic",
                kind=diagnostic.kind.value,
                field=diagnostic.field,
                detail=diagnostic.detail,
            )
        return True

    def warn(self, kind: DiagnosticKind, detail: str, *, field: str | None = None) -> bool:
        """Shorthand for adding a warning-level diagnostic."""
        return self.add(Diagnostic(kind=kind, field=field, detail=detail))

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        for diagnostic in diagnostics:
            _ = self.add(diagnostic)

    @property
    def items(self) -> tuple[Diagnostic, ...]:
        return tuple(self._items)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(tuple(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)
