from collections.abc import Callable
from pathlib import Path

import pytest

from openspec.artifact_graph import ArtifactGraph, MemoryFileSystem, Schema, parse_schema


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if Path(item.path).is_relative_to(Path(__file__).parent):
            item.add_marker(pytest.mark.unit)


SPEC_DRIVEN = """\
name: spec-driven
version: 1
description: Default workflow
artifacts:
  - id: proposal
    generates: proposal.md
    description: Why the change is needed
    template: proposal.md
    instruction: Explain the motivation.
  - id: specs
    generates: specs/**/*.md
    description: Requirements and scenarios
    template: specs/spec.md
    requires: [proposal]
  - id: design
    generates: design.md
    description: Technical design
    template: design.md
    requires: [proposal]
  - id: tasks
    generates: tasks.md
    description: Implementation checklist
    template: tasks.md
    requires: [specs, design]
apply:
  requires: [tasks]
  tracks: tasks.md
"""

PROJECT_ROOT = Path("/project")
CHANGE_DIR = PROJECT_ROOT / "openspec" / "changes" / "add-auth"


@pytest.fixture
def spec_driven_schema() -> Schema:
    return parse_schema(SPEC_DRIVEN)


@pytest.fixture
def spec_driven_graph(spec_driven_schema: Schema) -> ArtifactGraph:
    return ArtifactGraph.from_schema(spec_driven_schema)


@pytest.fixture
def memory_project() -> Callable[..., MemoryFileSystem]:
    """Return a factory for an in-memory project at ``/project``.

    The project defines the ``spec-driven`` schema in its project tier and a
    change named ``add-auth`` holding the given files.
    """

    def _make(
        files: dict[str, str] | None = None,
        *,
        schema: str = SPEC_DRIVEN,
        config: str | None = None,
    ) -> MemoryFileSystem:
        fs = MemoryFileSystem()
        schema_dir = PROJECT_ROOT / "openspec" / "schemas" / "spec-driven"
        fs.add_file(schema_dir / "schema.yaml", schema)
        for template in ("proposal.md", "specs/spec.md", "design.md", "tasks.md"):
            fs.add_file(schema_dir / "templates" / template, f"# {template}\n")
        fs.add_dir(CHANGE_DIR)
        for relative, content in (files or {}).items():
            fs.add_file(CHANGE_DIR / relative, content)
        if config is not None:
            fs.add_file(PROJECT_ROOT / "openspec" / "config.yaml", config)
        return fs

    return _make
