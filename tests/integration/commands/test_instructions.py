# pyright: reportAny=false
from __future__ import annotations

from typing import TYPE_CHECKING

import orjson

if TYPE_CHECKING:
    from collections.abc import Callable

    import pytest

    from tests.conftest import OpenSpecProject

CONFIG = """\
context: |
  Tech stack: Python, FastAPI
rules:
  proposal:
    - Include a rollback plan
  unknown-artifact:
    - Ignored
"""


class TestArtifactInstructions:
    def test_text_output_uses_package_template(
        self,
        openspec_project: OpenSpecProject,
        openspec_cli: Callable[..., int],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        change_dir = openspec_project.add_change("add-auth")

        exit_code = openspec_cli("instructions", "proposal", "--change", "add-auth")

        assert exit_code == 0
        out = capsys.readouterr().out
        assert '<artifact id="proposal" change="add-auth" schema="spec-driven">' in out
        assert f"Write to: {change_dir / 'proposal.md'}" in out
        assert "<template>" in out
        assert "## Why" in out
        assert "Completing this artifact enables: design, specs" in out

    def test_context_and_rules_from_config(
        self,
        openspec_project: OpenSpecProject,
        openspec_cli: Callable[..., int],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _ = openspec_project.add_change("add-auth")
        _ = openspec_project.write_config(CONFIG)

        exit_code = openspec_cli("instructions", "proposal", "-c", "add-auth", "--json")

        assert exit_code == 0
        captured = capsys.readouterr()
        data = orjson.loads(captured.out)
        assert data["context"] == "Tech stack: Python, FastAPI\n"
        assert data["rules"] == ["Include a rollback plan"]
        assert "Tech stack" not in data["template"]
        assert captured.err.count('Unknown artifact ID in rules: "unknown-artifact"') == 1

    def test_rules_absent_for_other_artifacts(
        self,
        openspec_project: OpenSpecProject,
        openspec_cli: Callable[..., int],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _ = openspec_project.add_change("add-auth")
        _ = openspec_project.write_config(CONFIG)

        exit_code = openspec_cli("instructions", "design", "-c", "add-auth", "--json")

        assert exit_code == 0
        data = orjson.loads(capsys.readouterr().out)
        assert "rules" not in data
        assert data["context"] == "Tech stack: Python, FastAPI\n"
        assert data["dependencies"] == [
            {
                "id": "proposal",
                "done": False,
                "path": "proposal.md",
                "description": data["dependencies"][0]["description"],
            }
        ]

    def test_blocked_artifact_warns_in_output(
        self,
        openspec_project: OpenSpecProject,
        openspec_cli: Callable[..., int],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _ = openspec_project.add_change("add-auth", {"proposal.md": "x"})

        exit_code = openspec_cli("instructions", "tasks", "-c", "add-auth")

        assert exit_code == 0
        out = capsys.readouterr().out
        assert "<warning>" in out
        assert "Missing: specs, design" in out

    def test_missing_artifact_argument(
        self,
        openspec_project: OpenSpecProject,
        openspec_cli: Callable[..., int],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _ = openspec_project.add_change("add-auth")

        exit_code = openspec_cli("instructions", "-c", "add-auth")

        assert exit_code == 2
        assert (
            "Missing required argument <artifact>. "
            "Valid artifacts: proposal, specs, design, tasks"
        ) in capsys.readouterr().err

    def test_unknown_artifact(
        self,
        openspec_project: OpenSpecProject,
        openspec_cli: Callable[..., int],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _ = openspec_project.add_change("add-auth")

        exit_code = openspec_cli("instructions", "nope", "-c", "add-auth")

        assert exit_code == 3
        assert "Artifact 'nope' not found in schema 'spec-driven'" in capsys.readouterr().err

    def test_missing_template(
        self,
        openspec_project: OpenSpecProject,
        openspec_cli: Callable[..., int],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _ = openspec_project.add_schema("mini", templates={"brief.md": "## Brief\n"})
        _ = openspec_project.add_change("add-auth", schema="mini")

        exit_code = openspec_cli("instructions", "plan", "-c", "add-auth")

        assert exit_code == 1
        assert "Template not found" in capsys.readouterr().err


class TestApplyInstructions:
    def test_blocked(
        self,
        openspec_project: OpenSpecProject,
        openspec_cli: Callable[..., int],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _ = openspec_project.add_change("add-auth", {"proposal.md": "x"})

        exit_code = openspec_cli("instructions", "apply", "-c", "add-auth")

        assert exit_code == 0
        out = capsys.readouterr().out
        assert "## Apply: add-auth" in out
        assert "Missing artifacts: tasks" in out

    def test_ready_json(
        self,
        openspec_project: OpenSpecProject,
        openspec_cli: Callable[..., int],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        change_dir = openspec_project.add_change(
            "add-auth",
            {
                "proposal.md": "x",
                "specs/auth/spec.md": "x",
                "design.md": "x",
                "tasks.md": "## 1. Work\n\n- [x] 1.1 First\n- [ ] 1.2 Second\n",
            },
        )

        exit_code = openspec_cli("instructions", "apply", "-c", "add-auth", "--json")

        assert exit_code == 0
        data = orjson.loads(capsys.readouterr().out)
        assert data["state"] == "ready"
        assert data["progress"] == {"total": 2, "complete": 1, "remaining": 1}
        assert data["tasks"][1] == {"id": 2, "description": "1.2 Second", "done": False}
        assert data["contextFiles"]["tasks"] == str(change_dir / "tasks.md")
        assert "missingArtifacts" not in data

    def test_all_done(
        self,
        openspec_project: OpenSpecProject,
        openspec_cli: Callable[..., int],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _ = openspec_project.add_change(
            "add-auth",
            {
                "proposal.md": "x",
                "specs/auth/spec.md": "x",
                "design.md": "x",
                "tasks.md": "- [x] done\n",
            },
        )

        exit_code = openspec_cli("instructions", "apply", "-c", "add-auth")

        assert exit_code == 0
        assert "1/1 complete ✓" in capsys.readouterr().out

    def test_unknown_change(
        self,
        openspec_project: OpenSpecProject,
        openspec_cli: Callable[..., int],
    ) -> None:
        assert openspec_cli("instructions", "apply", "-c", "nope") == 3
