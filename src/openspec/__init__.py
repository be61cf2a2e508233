"""OpenSpec: a spec-driven artifact workflow engine.

A workflow schema declares artifacts and the artifacts each one requires.
From a schema and the files present in a change directory the engine derives
each artifact's status, the enriched instructions for the next artifact and
the apply-phase task state.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("openspec")
except PackageNotFoundError:
    __version__ = "0.0.0"

from openspec.artifact_graph import (
    DEFAULT_SCHEMA,
    ApplyInstructions,
    ArtifactGraph,
    ArtifactInstructions,
    ChangeContext,
    ChangeStatus,
    Schema,
    format_change_status,
    generate_apply_instructions,
    generate_instructions,
    list_schemas,
    list_schemas_with_info,
    load_change_context,
    parse_schema,
    resolve_schema,
)
from openspec.diagnostics import Diagnostic, DiagnosticKind, DiagnosticsCollector
from openspec.exceptions import OpenSpecError

__all__ = [
    "DEFAULT_SCHEMA",
    "ApplyInstructions",
    "ArtifactGraph",
    "ArtifactInstructions",
    "ChangeContext",
    "ChangeStatus",
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticsCollector",
    "OpenSpecError",
    "Schema",
    "__version__",
    "format_change_status",
    "generate_apply_instructions",
    "generate_instructions",
    "list_schemas",
    "list_schemas_with_info",
    "load_change_context",
    "parse_schema",
    "resolve_schema",
]
