"""Change context, status formatting and artifact instructions."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from openspec.config import get_change_dir, read_project_config, validate_config_rules
from openspec.diagnostics import DiagnosticKind, DiagnosticsCollector
from openspec.exceptions import ArtifactNotFoundError, TemplateLoadError

from ._filesystem import LocalFileSystem
from ._graph import ArtifactGraph
from ._models import (
    ArtifactInstructions,
    ArtifactStatus,
    ArtifactStatusEntry,
    ChangeStatus,
    DependencyInfo,
)
from ._resolver import get_schema_dir, resolve_schema
from ._state import detect_completed

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from openspec.config import ProjectConfig

    from ._filesystem import FileSystem
    from ._models import ArtifactDefinition


@dataclass(frozen=True, slots=True)
class ChangeContext:
    """Resolved workflow state of one change for one invocation.

    Attributes:
        project_root: Directory containing ``openspec/``.
        change_name: Name of the change.
        change_dir: ``<project_root>/openspec/changes/<change_name>``.
        schema_name: Name of the schema in effect.
        graph: The schema's artifact graph.
        completed: Ids of artifacts whose outputs exist.
        diagnostics: Warn-once collector shared by everything the invocation
            does with this change.
    """

    project_root: Path
    change_name: str
    change_dir: Path
    schema_name: str
    graph: ArtifactGraph
    completed: frozenset[str]
    diagnostics: DiagnosticsCollector = field(default_factory=DiagnosticsCollector)


def load_change_context(
    project_root: Path,
    change_name: str,
    schema_name: str | None = None,
    *,
    fs: FileSystem | None = None,
    diagnostics: DiagnosticsCollector | None = None,
    logger: FilteringBoundLogger | None = None,
) -> ChangeContext:
    """Build the context for a change.

    The schema is chosen in this order: ``schema_name``, the change's
    ``.openspec.yaml``, the project config's ``schema``, then the default
    ``spec-driven``.

    Raises:
        SchemaNotFoundError: If the chosen schema does not exist.
        SchemaLoadError: If the schema file cannot be loaded.
        SchemaValidationError: If the schema file is invalid.

    Invalid change metadata is reported through ``diagnostics`` and does
    not stop resolution.
    """
    from openspec.changes import resolve_schema_for_change  # noqa: PLC0415

    fs = fs if fs is not None else LocalFileSystem()
    diagnostics = diagnostics if diagnostics is not None else DiagnosticsCollector(logger)
    project_root = Path(project_root)
    change_dir = get_change_dir(project_root, change_name)

    resolved_name = resolve_schema_for_change(
        change_dir,
        schema_name,
        project_root=project_root,
        fs=fs,
        diagnostics=diagnostics,
    )
    schema = resolve_schema(resolved_name, project_root, fs=fs, logger=logger)
    graph = ArtifactGraph.from_schema(schema)
    completed = detect_completed(graph, change_dir, fs, logger=logger)

    if logger is not None:
        logger.debug(
            "change_context_loaded",
            change=change_name,
            schema=resolved_name,
            completed=sorted(completed),
        )

    return ChangeContext(
        project_root=project_root,
        change_name=change_name,
        change_dir=change_dir,
        schema_name=resolved_name,
        graph=graph,
        completed=completed,
        diagnostics=diagnostics,
    )


def format_change_status(context: ChangeContext) -> ChangeStatus:
    """Compute the status of every artifact in a change, in build order.

    An artifact is ``done`` when its output exists, ``ready`` when every
    requirement is done, and ``blocked`` otherwise, listing exactly the
    unmet requirements. Pure: reads only the context.
    """
    graph = context.graph
    completed = context.completed
    blocked = graph.get_blocked(completed)

    entries: list[ArtifactStatusEntry] = []
    for artifact in graph.get_all_artifacts():
        if artifact.id in completed:
            status = ArtifactStatus.DONE
        elif artifact.id in blocked:
            status = ArtifactStatus.BLOCKED
        else:
            status = ArtifactStatus.READY
        entries.append(
            ArtifactStatusEntry(
                id=artifact.id,
                output_path=artifact.generates,
                status=status,
                missing_deps=tuple(blocked.get(artifact.id, ())),
            )
        )

    apply = graph.schema.apply
    apply_requires = apply.requires if apply is not None else graph.artifact_ids

    return ChangeStatus(
        change_name=context.change_name,
        schema_name=context.schema_name,
        is_complete=graph.is_complete(completed),
        apply_requires=tuple(apply_requires),
        artifacts=tuple(entries),
    )


def load_template(
    schema_name: str,
    template: str,
    project_root: Path | None = None,
    *,
    fs: FileSystem | None = None,
) -> str:
    """Read a template from the winning tier.

    ``<schema_dir>/templates/<template>`` is preferred; a template kept in the
    schema root is used otherwise, matching what ``validate_schema_dir``
    accepts.

    Raises:
        TemplateLoadError: If the schema or the template file is missing or
            unreadable.
    """
    fs = fs if fs is not None else LocalFileSystem()
    schema_dir = get_schema_dir(schema_name, project_root, fs=fs)
    if schema_dir is None:
        msg = f"Schema '{schema_name}' not found"
        raise TemplateLoadError(msg, template_path=template)

    full_path = schema_dir / "templates" / template
    if not fs.is_file(full_path):
        if not fs.is_file(schema_dir / template):
            msg = f"Template not found: {full_path}"
            raise TemplateLoadError(msg, template_path=full_path)
        full_path = schema_dir / template

    try:
        return fs.read_text(full_path)
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Failed to read template: {e}"
        raise TemplateLoadError(msg, template_path=full_path) from e


def _dependency_info(
    artifact: ArtifactDefinition, context: ChangeContext
) -> tuple[DependencyInfo, ...]:
    infos: list[DependencyInfo] = []
    for dep_id in artifact.requires:
        dep = context.graph.get_artifact(dep_id)
        infos.append(
            DependencyInfo(
                id=dep_id,
                done=dep_id in context.completed,
                path=dep.generates if dep is not None else dep_id,
                description=dep.description if dep is not None else "",
            )
        )
    return tuple(infos)


def _load_project_config(
    context: ChangeContext, project_root: Path, fs: FileSystem
) -> ProjectConfig | None:
    config, found = read_project_config(project_root, fs=fs)
    context.diagnostics.extend(found)
    if config is None:
        return None

    for warning in validate_config_rules(
        config.rules, context.graph.artifact_ids, context.schema_name
    ):
        _ = context.diagnostics.warn(
            DiagnosticKind.UNKNOWN_ARTIFACT_RULE, warning, field="rules"
        )
    return config


def generate_instructions(
    context: ChangeContext,
    artifact_id: str,
    project_root: Path | None = None,
    *,
    fs: FileSystem | None = None,
) -> ArtifactInstructions:
    """Build the enriched instructions for creating one artifact.

    The project config's ``context`` is passed through verbatim for every
    artifact; ``rules`` are attached only for the artifact they name.
    Unknown rule keys are reported once per invocation through
    ``context.diagnostics``.

    Raises:
        ArtifactNotFoundError: If ``artifact_id`` is not in the schema.
        TemplateLoadError: If the artifact's template is missing.
    """
    fs = fs if fs is not None else LocalFileSystem()
    artifact = context.graph.get_artifact(artifact_id)
    if artifact is None:
        valid_ids = context.graph.get_build_order()
        msg = (
            f"Artifact '{artifact_id}' not found in schema '{context.schema_name}'. "
            f"Valid artifacts: {', '.join(valid_ids)}"
        )
        raise ArtifactNotFoundError(
            msg,
            artifact_id=artifact_id,
            schema_name=context.schema_name,
            valid_ids=valid_ids,
        )

    template = load_template(
        context.schema_name, artifact.template, context.project_root, fs=fs
    )
    effective_root = Path(project_root) if project_root is not None else context.project_root
    config = _load_project_config(context, effective_root, fs)

    rules: tuple[str, ...] | None = None
    config_context: str | None = None
    if config is not None:
        config_context = config.context or None
        rules = config.rules.get(artifact_id) or None

    return ArtifactInstructions(
        change_name=context.change_name,
        artifact_id=artifact.id,
        schema_name=context.schema_name,
        change_dir=context.change_dir,
        output_path=artifact.generates,
        description=artifact.description,
        instruction=artifact.instruction,
        context=config_context,
        rules=rules,
        template=template,
        dependencies=_dependency_info(artifact, context),
        unlocks=tuple(context.graph.get_unlocks(artifact_id)),
    )
