"""Artifact graph engine.

This package turns a declarative workflow schema into per-change status,
enriched instructions for the next artifact and the apply-phase task state.

Example:
    >>> from openspec.artifact_graph import load_change_context, format_change_status
    >>> context = load_change_context(Path("."), "add-auth")
    >>> format_change_status(context).is_complete
    False
"""

from openspec.exceptions import (
    ArtifactNotFoundError,
    InvalidSchemaNameError,
    SchemaError,
    SchemaExistsError,
    SchemaLoadError,
    SchemaNotFoundError,
    SchemaValidationError,
    TemplateLoadError,
)

from ._filesystem import DirEntry, FileSystem, LocalFileSystem, MemoryFileSystem
from ._graph import ArtifactGraph
from ._models import (
    ApplyConfig,
    ApplyInstructions,
    ApplyProgress,
    ApplyState,
    ArtifactDefinition,
    ArtifactInstructions,
    ArtifactStatus,
    ArtifactStatusEntry,
    ChangeStatus,
    DependencyInfo,
    Schema,
    SchemaInfo,
    SchemaSource,
    TaskItem,
)
from ._resolver import (
    DEFAULT_SCHEMA,
    SCHEMA_FILE_NAMES,
    ResolvedSchemaLocation,
    SchemaResolution,
    SchemaShadow,
    SchemaTier,
    find_schema,
    get_schema_dir,
    get_schema_resolution,
    get_schema_source,
    get_schema_tiers,
    list_schema_resolutions,
    list_schemas,
    list_schemas_with_info,
    resolve_schema,
    schema_not_found,
    suggest_schemas,
)
from ._schema import (
    find_cycle,
    load_schema_file,
    normalize_schema_name,
    parse_schema,
    serialize_schema,
    validate_schema,
)
from ._state import artifact_output_exists, detect_completed
from ._instructions import (
    ChangeContext,
    format_change_status,
    generate_instructions,
    load_change_context,
    load_template,
)
from ._apply import generate_apply_instructions, parse_tasks
from ._validate import IssueLevel, SchemaIssue, validate_schema_dir
from ._authoring import (
    ForkedSchema,
    InitializedSchema,
    fork_schema,
    init_schema,
    validate_schema_name,
)

__all__ = [
    "DEFAULT_SCHEMA",
    "SCHEMA_FILE_NAMES",
    "ApplyConfig",
    "ApplyInstructions",
    "ApplyProgress",
    "ApplyState",
    "ArtifactDefinition",
    "ArtifactGraph",
    "ArtifactInstructions",
    "ArtifactNotFoundError",
    "ArtifactStatus",
    "ArtifactStatusEntry",
    "ChangeContext",
    "ChangeStatus",
    "DependencyInfo",
    "DirEntry",
    "FileSystem",
    "ForkedSchema",
    "InitializedSchema",
    "InvalidSchemaNameError",
    "IssueLevel",
    "LocalFileSystem",
    "MemoryFileSystem",
    "ResolvedSchemaLocation",
    "Schema",
    "SchemaError",
    "SchemaExistsError",
    "SchemaInfo",
    "SchemaIssue",
    "SchemaLoadError",
    "SchemaNotFoundError",
    "SchemaResolution",
    "SchemaShadow",
    "SchemaSource",
    "SchemaTier",
    "SchemaValidationError",
    "TaskItem",
    "TemplateLoadError",
    "artifact_output_exists",
    "detect_completed",
    "find_cycle",
    "find_schema",
    "fork_schema",
    "format_change_status",
    "generate_apply_instructions",
    "generate_instructions",
    "get_schema_dir",
    "get_schema_resolution",
    "get_schema_source",
    "get_schema_tiers",
    "init_schema",
    "list_schema_resolutions",
    "list_schemas",
    "list_schemas_with_info",
    "load_change_context",
    "load_schema_file",
    "load_template",
    "normalize_schema_name",
    "parse_schema",
    "parse_tasks",
    "resolve_schema",
    "schema_not_found",
    "serialize_schema",
    "suggest_schemas",
    "validate_schema",
    "validate_schema_dir",
    "validate_schema_name",
]
