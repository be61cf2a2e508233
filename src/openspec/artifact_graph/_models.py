# pyright: reportAny=false, reportExplicitAny=false
"""Data models for the artifact graph engine.

Schema definitions are frozen Pydantic models validated from YAML. Computed
outputs (status, instructions, apply state) are frozen dataclasses with
``to_dict`` methods producing the camelCase JSON shape consumed by agents.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Annotated, Any, ClassVar

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PositiveInt,
    field_validator,
)


# =============================================================================
# Enums
# =============================================================================


class ArtifactStatus(StrEnum):
    """Derived status of a single artifact within a change."""

    DONE = "done"
    READY = "ready"
    BLOCKED = "blocked"


class ApplyState(StrEnum):
    """State of the apply (implementation) phase for a change."""

    BLOCKED = "blocked"
    READY = "ready"
    ALL_DONE = "all_done"


class SchemaSource(StrEnum):
    """Schema tiers in precedence order (highest first)."""

    PROJECT = "project"
    USER = "user"
    PACKAGE = "package"


# =============================================================================
# Schema Definition Models
# =============================================================================


def _none_as_empty(value: Any) -> Any:
    return () if value is None else value


IdList = Annotated[tuple[str, ...], BeforeValidator(_none_as_empty)]


class ArtifactDefinition(BaseModel):
    """One document type in a workflow schema.

    Attributes:
        id: Identifier, unique within the schema.
        generates: Output path relative to the change directory; may be a
            glob pattern such as ``specs/**/*.md``.
        description: Human-readable description.
        template: Template filename relative to the schema's ``templates/``.
        instruction: Optional guidance for creating the artifact.
        requires: Ids of artifacts that must exist first.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(min_length=1)
    generates: str = Field(min_length=1)
    description: str
    template: str = Field(min_length=1)
    instruction: str | None = None
    requires: IdList = ()

    @property
    def is_glob(self) -> bool:
        """Whether ``generates`` is a glob pattern."""
        return "*" in self.generates


class ApplyConfig(BaseModel):
    """Apply-phase configuration of a schema.

    Attributes:
        requires: Artifact ids that must exist before implementation starts.
        tracks: Checkbox tracking file relative to the change directory.
        instruction: Optional instruction override for the apply phase.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    requires: IdList
    tracks: str | None = None
    instruction: str | None = None


class Schema(BaseModel):
    """A named, versioned workflow definition.

    Attributes:
        name: Schema name.
        version: Schema version number.
        description: Optional description.
        artifacts: Artifact definitions in declaration order.
        apply: Optional apply-phase configuration.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(min_length=1)
    version: PositiveInt
    description: str = ""
    artifacts: tuple[ArtifactDefinition, ...] = Field(min_length=1)
    apply: ApplyConfig | None = None

    @field_validator("description", mode="before")
    @classmethod
    def _none_as_blank(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def artifact_ids(self) -> tuple[str, ...]:
        """Artifact ids in declaration order."""
        return tuple(artifact.id for artifact in self.artifacts)


@dataclass(frozen=True, slots=True)
class SchemaInfo:
    """Summary of a discoverable schema and the tier that supplies it."""

    name: str
    description: str
    artifacts: tuple[str, ...]
    source: SchemaSource

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "artifacts": list(self.artifacts),
            "source": self.source.value,
        }


# =============================================================================
# Status Models
# =============================================================================


@dataclass(frozen=True, slots=True)
class ArtifactStatusEntry:
    """Status of one artifact in a change.

    Attributes:
        id: Artifact id.
        output_path: The artifact's ``generates`` path or pattern.
        status: Derived status.
        missing_deps: Unmet requirements (only populated when blocked).
    """

    id: str
    output_path: str
    status: ArtifactStatus
    missing_deps: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "outputPath": self.output_path,
            "status": self.status.value,
        }
        if self.status is ArtifactStatus.BLOCKED:
            data["missingDeps"] = list(self.missing_deps)
        return data


@dataclass(frozen=True, slots=True)
class ChangeStatus:
    """Completion status of every artifact in a change, in build order."""

    change_name: str
    schema_name: str
    is_complete: bool
    apply_requires: tuple[str, ...]
    artifacts: tuple[ArtifactStatusEntry, ...]

    def get(self, artifact_id: str) -> ArtifactStatusEntry | None:
        """Look up the entry for an artifact id."""
        for entry in self.artifacts:
            if entry.id == artifact_id:
                return entry
        return None

    @property
    def done_count(self) -> int:
        return sum(1 for a in self.artifacts if a.status is ArtifactStatus.DONE)

    def to_dict(self) -> dict[str, Any]:
        return {
            "changeName": self.change_name,
            "schemaName": self.schema_name,
            "isComplete": self.is_complete,
            "applyRequires": list(self.apply_requires),
            "artifacts": [artifact.to_dict() for artifact in self.artifacts],
        }


# =============================================================================
# Instruction Models
# =============================================================================


@dataclass(frozen=True, slots=True)
class DependencyInfo:
    """A required artifact with its completion flag."""

    id: str
    done: bool
    path: str
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "done": self.done,
            "path": self.path,
            "description": self.description,
        }


@dataclass(frozen=True, slots=True)
class ArtifactInstructions:
    """Enriched payload for creating one artifact.

    ``context``, ``rules`` and ``template`` are independent fields; none is
    ever folded into another. ``rules`` is None unless the project config
    has at least one non-empty rule for this artifact.
    """

    change_name: str
    artifact_id: str
    schema_name: str
    change_dir: Path
    output_path: str
    description: str
    instruction: str | None
    context: str | None
    rules: tuple[str, ...] | None
    template: str
    dependencies: tuple[DependencyInfo, ...]
    unlocks: tuple[str, ...]

    @property
    def is_blocked(self) -> bool:
        """Whether any dependency is still missing."""
        return any(not dep.done for dep in self.dependencies)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "changeName": self.change_name,
            "artifactId": self.artifact_id,
            "schemaName": self.schema_name,
            "changeDir": str(self.change_dir),
            "outputPath": self.output_path,
            "description": self.description,
        }
        if self.instruction is not None:
            data["instruction"] = self.instruction
        if self.context is not None:
            data["context"] = self.context
        if self.rules is not None:
            data["rules"] = list(self.rules)
        data["template"] = self.template
        data["dependencies"] = [dep.to_dict() for dep in self.dependencies]
        data["unlocks"] = list(self.unlocks)
        return data


# =============================================================================
# Apply Models
# =============================================================================


@dataclass(frozen=True, slots=True)
class TaskItem:
    """One checkbox line from a tracking file.

    Attributes:
        id: Sequential 1-based position among checkbox lines.
        description: Text following the checkbox.
        done: Whether the box is checked.
    """

    id: int
    description: str
    done: bool

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "description": self.description, "done": self.done}


@dataclass(frozen=True, slots=True)
class ApplyProgress:
    """Task counts derived from a parsed task list."""

    total: int = 0
    complete: int = 0
    remaining: int = 0

    @classmethod
    def from_tasks(cls, tasks: tuple[TaskItem, ...] | list[TaskItem]) -> ApplyProgress:
        total = len(tasks)
        complete = sum(1 for task in tasks if task.done)
        return cls(total=total, complete=complete, remaining=total - complete)

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "complete": self.complete,
            "remaining": self.remaining,
        }


@dataclass(frozen=True, slots=True)
class ApplyInstructions:
    """Apply-phase state and instructions for a change."""

    change_name: str
    change_dir: Path
    schema_name: str
    context_files: dict[str, Path]
    progress: ApplyProgress
    tasks: tuple[TaskItem, ...]
    state: ApplyState
    instruction: str
    missing_artifacts: tuple[str, ...] | None = None
    tracks: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "changeName": self.change_name,
            "changeDir": str(self.change_dir),
            "schemaName": self.schema_name,
            "contextFiles": {key: str(path) for key, path in self.context_files.items()},
            "progress": self.progress.to_dict(),
            "tasks": [task.to_dict() for task in self.tasks],
            "state": self.state.value,
        }
        if self.missing_artifacts is not None:
            data["missingArtifacts"] = list(self.missing_artifacts)
        data["instruction"] = self.instruction
        return data
