"""Artifact dependency graph."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Collection

    from ._models import ArtifactDefinition, Schema


class ArtifactGraph:
    """Read-only view of a schema's artifacts as a dependency DAG.

    The graph never touches the filesystem. Completion state is always
    supplied by the caller as a set of artifact ids.

    Build order assigns each artifact a depth (0 without requirements,
    otherwise one more than the deepest requirement) and sorts stably by
    depth, so artifacts at equal depth keep their declaration order.

    Example:
        >>> graph = ArtifactGraph.from_schema(schema)
        >>> graph.get_next_artifacts({"proposal"})
        ['specs', 'design']
    """

    __slots__ = ("_artifacts", "_build_order", "_schema", "_unlocks")

    def __init__(self, schema: Schema) -> None:
        self._schema: Schema = schema
        self._artifacts: dict[str, ArtifactDefinition] = {
            artifact.id: artifact for artifact in schema.artifacts
        }
        self._build_order: tuple[str, ...] = self._compute_build_order()
        self._unlocks: dict[str, tuple[str, ...]] = self._compute_unlocks()

    @classmethod
    def from_schema(cls, schema: Schema) -> ArtifactGraph:
        """Build a graph from a validated schema."""
        return cls(schema)

    def _compute_build_order(self) -> tuple[str, ...]:
        depth: dict[str, int] = {}

        def depth_of(artifact_id: str) -> int:
            if artifact_id not in depth:
                requires = self._artifacts[artifact_id].requires
                depth[artifact_id] = (
                    1 + max(depth_of(dep) for dep in requires) if requires else 0
                )
            return depth[artifact_id]

        declared = list(self._artifacts)
        return tuple(sorted(declared, key=depth_of))

    def _compute_unlocks(self) -> dict[str, tuple[str, ...]]:
        unlocks: dict[str, list[str]] = {artifact_id: [] for artifact_id in self._artifacts}
        for artifact in self._artifacts.values():
            for dep in artifact.requires:
                unlocks[dep].append(artifact.id)
        return {key: tuple(sorted(value)) for key, value in unlocks.items()}

    @property
    def schema(self) -> Schema:
        return self._schema

    @property
    def artifact_ids(self) -> tuple[str, ...]:
        """Artifact ids in declaration order."""
        return tuple(self._artifacts)

    def get_name(self) -> str:
        return self._schema.name

    def get_artifact(self, artifact_id: str) -> ArtifactDefinition | None:
        """Return the artifact definition, or None if the id is unknown."""
        return self._artifacts.get(artifact_id)

    def get_all_artifacts(self) -> list[ArtifactDefinition]:
        """Return every artifact in build order."""
        return [self._artifacts[artifact_id] for artifact_id in self._build_order]

    def get_build_order(self) -> list[str]:
        """Return artifact ids in a topological order."""
        return list(self._build_order)

    def get_unlocks(self, artifact_id: str) -> list[str]:
        """Return the sorted ids of artifacts that directly require ``artifact_id``."""
        return list(self._unlocks.get(artifact_id, ()))

    def get_next_artifacts(self, completed: Collection[str]) -> list[str]:
        """Return artifacts that are not done and whose requirements are all done.

        Results follow build order.
        """
        done = set(completed)
        return [
            artifact_id
            for artifact_id in self._build_order
            if artifact_id not in done
            and all(dep in done for dep in self._artifacts[artifact_id].requires)
        ]

    def get_blocked(self, completed: Collection[str]) -> dict[str, list[str]]:
        """Map each blocked artifact to its unmet requirements.

        An artifact is blocked when it is not done and at least one of its
        requirements is not done. Unmet requirements keep declaration order.
        """
        done = set(completed)
        blocked: dict[str, list[str]] = {}
        for artifact_id in self._build_order:
            if artifact_id in done:
                continue
            unmet = [dep for dep in self._artifacts[artifact_id].requires if dep not in done]
            if unmet:
                blocked[artifact_id] = unmet
        return blocked

    def is_complete(self, completed: Collection[str]) -> bool:
        """Return True iff every artifact id is in ``completed``."""
        done = set(completed)
        return all(artifact_id in done for artifact_id in self._artifacts)

    def __len__(self) -> int:
        return len(self._artifacts)

    def __contains__(self, artifact_id: object) -> bool:
        return artifact_id in self._artifacts

    def __repr__(self) -> str:
        return f"ArtifactGraph(name={self.get_name()!r}, artifacts={len(self)})"
