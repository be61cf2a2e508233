"""Unit tests for the apply-phase state machine."""

from collections.abc import Callable
from pathlib import Path

from openspec.artifact_graph import (
    ApplyState,
    MemoryFileSystem,
    TaskItem,
    generate_apply_instructions,
    parse_tasks,
)

ProjectFactory = Callable[..., MemoryFileSystem]

PROJECT_ROOT = Path("/project")
CHANGE_DIR = PROJECT_ROOT / "openspec" / "changes" / "add-auth"
SCHEMA_FILE = PROJECT_ROOT / "openspec" / "schemas" / "spec-driven" / "schema.yaml"

ALL_ARTIFACTS = {
    "proposal.md": "# Proposal",
    "specs/auth/spec.md": "# Spec",
    "design.md": "# Design",
}


def _edit_schema(fs: MemoryFileSystem, edit: Callable[[str], str]) -> None:
    fs.add_file(SCHEMA_FILE, edit(fs.read_text(SCHEMA_FILE)))


class TestParseTasks:
    def test_checkbox_styles(self) -> None:
        content = "- [ ] one\n- [x] two\n* [X] three\n*[ ] four"

        assert parse_tasks(content) == [
            TaskItem(id=1, description="one", done=False),
            TaskItem(id=2, description="two", done=True),
            TaskItem(id=3, description="three", done=True),
            TaskItem(id=4, description="four", done=False),
        ]

    def test_ids_are_sequential_across_non_task_lines(self) -> None:
        content = "## 1. Setup\n\n- [x] 1.1 Install\n\nSome prose\n- [ ] 1.2 Configure\n"

        tasks = parse_tasks(content)

        assert [task.id for task in tasks] == [1, 2]
        assert tasks[1].description == "1.2 Configure"

    def test_indented_checkboxes_are_ignored(self) -> None:
        assert parse_tasks("  - [ ] nested\n- [ ] top") == [
            TaskItem(id=1, description="top", done=False)
        ]

    def test_trailing_whitespace_is_trimmed(self) -> None:
        assert parse_tasks("- [ ] spaced   ")[0].description == "spaced"

    def test_other_box_contents_are_not_tasks(self) -> None:
        assert parse_tasks("- [-] skipped\n- [] empty\n- text") == []

    def test_empty(self) -> None:
        assert parse_tasks("") == []


class TestApplyBlocked:
    def test_missing_required_artifact(self, memory_project: ProjectFactory) -> None:
        fs = memory_project({"proposal.md": "x"})

        result = generate_apply_instructions(PROJECT_ROOT, "add-auth", fs=fs)

        assert result.state is ApplyState.BLOCKED
        assert result.missing_artifacts == ("tasks",)
        assert result.instruction.startswith("Cannot apply this change yet.")
        assert "Missing artifacts: tasks." in result.instruction

    def test_tracking_file_without_tasks(self, memory_project: ProjectFactory) -> None:
        fs = memory_project({**ALL_ARTIFACTS, "tasks.md": "# Tasks\n\nNothing yet.\n"})

        result = generate_apply_instructions(PROJECT_ROOT, "add-auth", fs=fs)

        assert result.state is ApplyState.BLOCKED
        assert result.missing_artifacts is None
        assert result.progress.total == 0
        assert "The tasks.md file exists but contains no tasks." in result.instruction

    def test_missing_tracking_file(self, memory_project: ProjectFactory) -> None:
        fs = memory_project(ALL_ARTIFACTS)
        _edit_schema(fs, lambda text: text.replace("requires: [tasks]", "requires: [design]"))

        result = generate_apply_instructions(PROJECT_ROOT, "add-auth", fs=fs)

        assert result.state is ApplyState.BLOCKED
        assert result.instruction.startswith("The tasks.md file is missing")


class TestApplyReady:
    def test_pending_tasks(self, memory_project: ProjectFactory) -> None:
        fs = memory_project({**ALL_ARTIFACTS, "tasks.md": "- [x] a\n- [ ] b\n- [ ] c\n"})

        result = generate_apply_instructions(PROJECT_ROOT, "add-auth", fs=fs)

        assert result.state is ApplyState.READY
        assert (result.progress.total, result.progress.complete, result.progress.remaining) == (
            3,
            1,
            2,
        )
        assert result.instruction.startswith("Read context files, work through pending tasks")
        assert result.tracks == "tasks.md"

    def test_context_files_cover_existing_outputs(
        self, memory_project: ProjectFactory
    ) -> None:
        fs = memory_project({**ALL_ARTIFACTS, "tasks.md": "- [ ] a"})

        result = generate_apply_instructions(PROJECT_ROOT, "add-auth", fs=fs)

        assert result.context_files == {
            "proposal": CHANGE_DIR / "proposal.md",
            "specs": CHANGE_DIR / "specs/**/*.md",
            "design": CHANGE_DIR / "design.md",
            "tasks": CHANGE_DIR / "tasks.md",
        }

    def test_schema_instruction_overrides_default(
        self, memory_project: ProjectFactory
    ) -> None:
        fs = memory_project({**ALL_ARTIFACTS, "tasks.md": "- [ ] a"})
        _edit_schema(fs, lambda text: text + "  instruction: '  Follow the plan.  '\n")

        result = generate_apply_instructions(PROJECT_ROOT, "add-auth", fs=fs)

        assert result.instruction == "Follow the plan."

    def test_without_apply_block(self, memory_project: ProjectFactory) -> None:
        fs = memory_project({**ALL_ARTIFACTS, "tasks.md": "no checkboxes"})
        _edit_schema(fs, lambda text: text.split("apply:")[0])

        result = generate_apply_instructions(PROJECT_ROOT, "add-auth", fs=fs)

        assert result.state is ApplyState.READY
        assert result.tracks is None
        assert result.tasks == ()
        assert result.instruction == (
            "All required artifacts complete. Proceed with implementation."
        )

    def test_without_apply_block_every_artifact_is_required(
        self, memory_project: ProjectFactory
    ) -> None:
        fs = memory_project({"proposal.md": "x", "tasks.md": "- [ ] a"})
        _edit_schema(fs, lambda text: text.split("apply:")[0])

        result = generate_apply_instructions(PROJECT_ROOT, "add-auth", fs=fs)

        assert result.state is ApplyState.BLOCKED
        assert result.missing_artifacts == ("specs", "design")


class TestApplyAllDone:
    def test_all_checked(self, memory_project: ProjectFactory) -> None:
        fs = memory_project({**ALL_ARTIFACTS, "tasks.md": "- [x] a\n- [X] b\n"})

        result = generate_apply_instructions(PROJECT_ROOT, "add-auth", fs=fs)

        assert result.state is ApplyState.ALL_DONE
        assert result.progress.remaining == 0
        assert result.instruction.startswith("All tasks are complete!")

    def test_to_dict(self, memory_project: ProjectFactory) -> None:
        fs = memory_project({**ALL_ARTIFACTS, "tasks.md": "- [x] a\n"})

        data = generate_apply_instructions(PROJECT_ROOT, "add-auth", fs=fs).to_dict()

        assert data["state"] == "all_done"
        assert data["progress"] == {"total": 1, "complete": 1, "remaining": 0}
        assert data["tasks"] == [{"id": 1, "description": "a", "done": True}]
        assert "missingArtifacts" not in data
        assert list(data)[-1] == "instruction"
