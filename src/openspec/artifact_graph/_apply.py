"""Apply-phase state machine.

The apply phase starts once the schema's required artifacts exist. Progress
is tracked with markdown checkboxes in a tracking file (``tasks.md`` in the
default schema). State is derived on every call:

- ``blocked``: a required artifact is missing, the tracking file is
  configured but absent, or it exists with no checkboxes
- ``all_done``: the tracking file has at least one task and all are checked
- ``ready``: anything else
"""

from __future__ import annotations

import re
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from ._filesystem import LocalFileSystem
from ._instructions import load_change_context
from ._models import ApplyInstructions, ApplyProgress, ApplyState, TaskItem
from ._state import artifact_output_exists

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from openspec.diagnostics import DiagnosticsCollector

    from ._filesystem import FileSystem

_TASK_RE = re.compile(r"^[-*]\s*\[([ xX])\]\s*(.+?)\s*$")

_READY_WITH_TRACKING = (
    "Read context files, work through pending tasks, mark complete as you go.\n"
    "Pause if you hit blockers or need clarification."
)
_READY_WITHOUT_TRACKING = "All required artifacts complete. Proceed with implementation."
_ALL_DONE = (
    "All tasks are complete! This change is ready to be archived.\n"
    "Consider running tests and reviewing the changes before archiving."
)


def parse_tasks(content: str) -> list[TaskItem]:
    """Extract checkbox tasks from markdown.

    Lines of the form ``- [ ] text``, ``- [x] text`` or ``* [X] text`` become
    tasks numbered from 1 in file order. Other lines, including indented
    checkboxes, are ignored.

    Example:
        >>> parse_tasks("- [x] one\\n- [ ] two")
        [TaskItem(id=1, description='one', done=True), TaskItem(id=2, description='two', done=False)]
    """
    tasks: list[TaskItem] = []
    for line in content.splitlines():
        match = _TASK_RE.match(line)
        if match is None:
            continue
        tasks.append(
            TaskItem(
                id=len(tasks) + 1,
                description=match.group(2),
                done=match.group(1).lower() == "x",
            )
        )
    return tasks


def _schema_instruction(instruction: str | None) -> str | None:
    if instruction is None:
        return None
    return instruction.strip() or None


def generate_apply_instructions(
    project_root: Path,
    change_name: str,
    schema_name: str | None = None,
    *,
    fs: FileSystem | None = None,
    diagnostics: DiagnosticsCollector | None = None,
    logger: FilteringBoundLogger | None = None,
) -> ApplyInstructions:
    """Compute the apply-phase state and instructions for a change.

    Without an ``apply`` block every artifact is required and no tracking
    file is used.

    Raises:
        SchemaNotFoundError: If the change's schema does not exist.
        SchemaLoadError: If the schema file cannot be loaded.
        SchemaValidationError: If the schema file is invalid.
    """
    fs = fs if fs is not None else LocalFileSystem()
    context = load_change_context(
        project_root,
        change_name,
        schema_name,
        fs=fs,
        diagnostics=diagnostics,
        logger=logger,
    )
    schema = context.graph.schema
    change_dir = context.change_dir
    apply = schema.apply

    required = apply.requires if apply is not None else schema.artifact_ids
    tracks = apply.tracks if apply is not None else None
    schema_instruction = _schema_instruction(apply.instruction if apply is not None else None)

    missing: list[str] = []
    for artifact_id in required:
        artifact = context.graph.get_artifact(artifact_id)
        if artifact is not None and not artifact_output_exists(
            change_dir, artifact.generates, fs
        ):
            missing.append(artifact_id)

    context_files = {
        artifact.id: change_dir / artifact.generates
        for artifact in schema.artifacts
        if artifact_output_exists(change_dir, artifact.generates, fs)
    }

    tasks: list[TaskItem] = []
    tracks_exists = False
    if tracks is not None:
        tracks_path = change_dir / tracks
        tracks_exists = fs.is_file(tracks_path)
        if tracks_exists:
            tasks = parse_tasks(fs.read_text(tracks_path))

    progress = ApplyProgress.from_tasks(tasks)
    tracks_name = PurePosixPath(tracks).name if tracks is not None else ""

    if missing:
        state = ApplyState.BLOCKED
        instruction = (
            f"Cannot apply this change yet. Missing artifacts: {', '.join(missing)}.\n"
            "Create the missing artifacts first."
        )
    elif tracks is not None and not tracks_exists:
        state = ApplyState.BLOCKED
        instruction = (
            f"The {tracks_name} file is missing and must be created.\n"
            "Generate the tracking file before applying."
        )
    elif tracks is not None and progress.total == 0:
        state = ApplyState.BLOCKED
        instruction = (
            f"The {tracks_name} file exists but contains no tasks.\n"
            f"Add tasks to {tracks_name} or regenerate it."
        )
    elif tracks is not None and progress.remaining == 0:
        state = ApplyState.ALL_DONE
        instruction = schema_instruction or _ALL_DONE
    else:
        state = ApplyState.READY
        default = _READY_WITH_TRACKING if tracks is not None else _READY_WITHOUT_TRACKING
        instruction = schema_instruction or default

    if logger is not None:
        logger.debug(
            "apply_state_computed",
            change=change_name,
            state=state.value,
            missing=missing,
            total=progress.total,
            complete=progress.complete,
        )

    return ApplyInstructions(
        change_name=change_name,
        change_dir=change_dir,
        schema_name=context.schema_name,
        context_files=context_files,
        progress=progress,
        tasks=tuple(tasks),
        state=state,
        instruction=instruction,
        missing_artifacts=tuple(missing) if missing else None,
        tracks=tracks,
    )
