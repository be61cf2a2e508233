"""Shared test fixtures for OpenSpec tests."""

from dataclasses import dataclass
from pathlib import Path

import pytest
import yaml
from rich.console import Console

MINI_SCHEMA = """\
name: mini
version: 1
description: Three step test workflow
artifacts:
  - id: brief
    generates: brief.md
    description: Short brief
    template: brief.md
    instruction: Write the brief.
  - id: notes
    generates: notes/*.md
    description: Working notes
    template: notes.md
    requires: [brief]
  - id: plan
    generates: plan.md
    description: Implementation plan
    template: plan.md
    requires: [brief, notes]
apply:
  requires: [plan]
  tracks: plan.md
"""

MINI_TEMPLATES = {
    "brief.md": "## Brief\n",
    "notes.md": "## Notes\n",
    "plan.md": "## Plan\n\n- [ ] step\n",
}


@dataclass(frozen=True, slots=True)
class OpenSpecProject:
    """Paths for an OpenSpec-enabled test project."""

    root: Path
    openspec_dir: Path
    changes_dir: Path
    schemas_dir: Path

    def add_change(
        self,
        name: str,
        files: dict[str, str] | None = None,
        *,
        schema: str | None = None,
    ) -> Path:
        """Create a change directory with the given files.

        Args:
            name: Change name.
            files: Mapping of relative path to content.
            schema: Schema to record in ``.openspec.yaml``.

        Returns:
            Path to the change directory.
        """
        change_dir = self.changes_dir / name
        change_dir.mkdir(parents=True, exist_ok=True)
        if schema is not None:
            (change_dir / ".openspec.yaml").write_text(
                yaml.safe_dump({"schema": schema, "created": "2025-01-15"})
            )
        for relative, content in (files or {}).items():
            path = change_dir / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return change_dir

    def write_config(self, content: str, *, name: str = "config.yaml") -> Path:
        """Write ``openspec/config.yaml`` (or another config file name)."""
        path = self.openspec_dir / name
        path.write_text(content)
        return path

    def add_schema(
        self,
        name: str,
        content: str = MINI_SCHEMA,
        templates: dict[str, str] | None = None,
        *,
        base_dir: Path | None = None,
    ) -> Path:
        """Create a schema directory with templates.

        Args:
            name: Schema directory name.
            content: schema.yaml content.
            templates: Template files keyed by relative path; defaults to
                the mini schema's templates.
            base_dir: Tier directory to create the schema in; defaults to the
                project tier.

        Returns:
            Path to the schema directory.
        """
        schema_dir = (base_dir if base_dir is not None else self.schemas_dir) / name
        templates_dir = schema_dir / "templates"
        templates_dir.mkdir(parents=True, exist_ok=True)
        (schema_dir / "schema.yaml").write_text(content)
        for relative, body in (MINI_TEMPLATES if templates is None else templates).items():
            path = templates_dir / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(body)
        return schema_dir


@pytest.fixture(autouse=True)
def _isolate_environment(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> Path:
    """Point user data and logs at temporary directories for every test."""
    data_home = tmp_path_factory.mktemp("xdg-data")
    log_dir = tmp_path_factory.mktemp("logs")
    monkeypatch.setenv("XDG_DATA_HOME", str(data_home))
    monkeypatch.setenv("OPENSPEC_LOG_FILE", str(log_dir / "cli.log"))
    for name in ("OPENSPEC_DEBUG", "OPENSPEC_LOG_LEVEL", "OPENSPEC_LOG_FORMAT"):
        monkeypatch.delenv(name, raising=False)
    return data_home


@pytest.fixture
def user_schemas_dir(_isolate_environment: Path) -> Path:
    """The isolated user-tier schema directory (not created)."""
    return _isolate_environment / "openspec" / "schemas"


@pytest.fixture
def openspec_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> OpenSpecProject:
    """Create an OpenSpec project and make it the working directory.

    Structure:
        tmp_path/
            project/
                openspec/
                    changes/
                    schemas/      # not created until a schema is added
    """
    root = tmp_path / "project"
    openspec_dir = root / "openspec"
    changes_dir = openspec_dir / "changes"
    changes_dir.mkdir(parents=True)
    monkeypatch.chdir(root)
    return OpenSpecProject(
        root=root.resolve(),
        openspec_dir=openspec_dir.resolve(),
        changes_dir=changes_dir.resolve(),
        schemas_dir=(openspec_dir / "schemas").resolve(),
    )


@pytest.fixture
def console() -> Console:
    return Console(
        width=70,
        force_terminal=True,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )
