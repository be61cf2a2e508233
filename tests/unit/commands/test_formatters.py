"""Unit tests for workflow command text renderers."""

from pathlib import Path

from openspec.artifact_graph import (
    ApplyInstructions,
    ApplyProgress,
    ApplyState,
    ArtifactInstructions,
    ArtifactStatus,
    ArtifactStatusEntry,
    ChangeStatus,
    DependencyInfo,
    SchemaInfo,
    SchemaResolution,
    SchemaShadow,
    SchemaSource,
    TaskItem,
)
from openspec.cli._commands._formatters import (
    format_apply_instructions_text,
    format_artifact_instructions_text,
    format_change_status_text,
    format_schema_resolution_text,
    format_schema_resolutions_text,
    format_schemas_table,
    format_templates_table,
)

CHANGE_DIR = Path("/p/openspec/changes/add-auth")


def _instructions(**overrides: object) -> ArtifactInstructions:
    values: dict[str, object] = {
        "change_name": "add-auth",
        "artifact_id": "design",
        "schema_name": "spec-driven",
        "change_dir": CHANGE_DIR,
        "output_path": "design.md",
        "description": "Technical design",
        "instruction": None,
        "context": None,
        "rules": None,
        "template": "## Context\n\n## Decisions\n",
        "dependencies": (
            DependencyInfo(id="proposal", done=True, path="proposal.md", description="Why"),
        ),
        "unlocks": ("tasks",),
    }
    values.update(overrides)
    return ArtifactInstructions(**values)  # pyright: ignore[reportArgumentType]


class TestFormatChangeStatusText:
    def test_checklist(self) -> None:
        status = ChangeStatus(
            change_name="add-auth",
            schema_name="spec-driven",
            is_complete=False,
            apply_requires=("tasks",),
            artifacts=(
                ArtifactStatusEntry("proposal", "proposal.md", ArtifactStatus.DONE),
                ArtifactStatusEntry("design", "design.md", ArtifactStatus.READY),
                ArtifactStatusEntry(
                    "tasks", "tasks.md", ArtifactStatus.BLOCKED, ("specs", "design")
                ),
            ),
        )

        assert format_change_status_text(status) == "\n".join(
            [
                "Change: add-auth",
                "Schema: spec-driven",
                "Progress: 1/3 artifacts complete",
                "",
                "[x] proposal",
                "[ ] design",
                "[-] tasks (blocked by: specs, design)",
            ]
        )

    def test_complete(self) -> None:
        status = ChangeStatus(
            change_name="add-auth",
            schema_name="mini",
            is_complete=True,
            apply_requires=("brief",),
            artifacts=(ArtifactStatusEntry("brief", "brief.md", ArtifactStatus.DONE),),
        )

        assert format_change_status_text(status).endswith("\n\nAll artifacts complete!")


class TestFormatArtifactInstructionsText:
    def test_sections_in_order(self) -> None:
        text = format_artifact_instructions_text(
            _instructions(
                instruction="Explain decisions.",
                context="Python 3.12\n",
                rules=("Cite the proposal",),
            )
        )

        tags = [
            "<artifact",
            "<task>",
            "<project_context>",
            "<rules>",
            "<dependencies>",
            "<output>",
            "<instruction>",
            "<template>",
            "<unlocks>",
            "</artifact>",
        ]
        positions = [text.index(tag) for tag in tags]
        assert positions == sorted(positions)
        assert "- Cite the proposal" in text
        assert f"Write to: {CHANGE_DIR / 'design.md'}" in text
        assert "Completing this artifact enables: tasks" in text

    def test_context_and_rules_stay_out_of_template(self) -> None:
        text = format_artifact_instructions_text(
            _instructions(context="Use Postgres", rules=("No ORMs",))
        )

        template_section = text[text.index("<template>") : text.index("</template>")]
        assert "Use Postgres" not in template_section
        assert "No ORMs" not in template_section

    def test_optional_sections_omitted(self) -> None:
        text = format_artifact_instructions_text(_instructions(dependencies=(), unlocks=()))

        for tag in ("<warning>", "<project_context>", "<rules>", "<dependencies>", "<unlocks>"):
            assert tag not in text
        assert "<instruction>" not in text

    def test_warning_for_missing_dependencies(self) -> None:
        text = format_artifact_instructions_text(
            _instructions(
                dependencies=(
                    DependencyInfo(id="specs", done=False, path="specs/**/*.md", description="S"),
                )
            )
        )

        assert "<warning>" in text
        assert "Missing: specs" in text
        assert '<dependency id="specs" status="missing">' in text


class TestFormatApplyInstructionsText:
    def test_blocked(self) -> None:
        text = format_apply_instructions_text(
            ApplyInstructions(
                change_name="add-auth",
                change_dir=CHANGE_DIR,
                schema_name="spec-driven",
                context_files={"proposal": CHANGE_DIR / "proposal.md"},
                progress=ApplyProgress(),
                tasks=(),
                state=ApplyState.BLOCKED,
                instruction="Create the missing artifacts first.",
                missing_artifacts=("tasks",),
                tracks="tasks.md",
            )
        )

        assert text.startswith("## Apply: add-auth\nSchema: spec-driven\n")
        assert "### Blocked\n\nMissing artifacts: tasks" in text
        assert f"- proposal: {CHANGE_DIR / 'proposal.md'}" in text
        assert "### Progress" not in text
        assert text.endswith("### Instruction\nCreate the missing artifacts first.")

    def test_all_done(self) -> None:
        tasks = (TaskItem(1, "one", done=True), TaskItem(2, "two", done=True))
        text = format_apply_instructions_text(
            ApplyInstructions(
                change_name="add-auth",
                change_dir=CHANGE_DIR,
                schema_name="spec-driven",
                context_files={},
                progress=ApplyProgress.from_tasks(tasks),
                tasks=tasks,
                state=ApplyState.ALL_DONE,
                instruction="Done.",
                tracks="tasks.md",
            )
        )

        assert "### Progress\n2/2 complete ✓" in text
        assert "### Tasks\n- [x] one\n- [x] two" in text
        assert "### Context Files" not in text


class TestSchemaTables:
    def test_schemas_table(self) -> None:
        table = format_schemas_table(
            [
                SchemaInfo(
                    name="spec-driven",
                    description="Default workflow",
                    artifacts=("proposal", "tasks"),
                    source=SchemaSource.PACKAGE,
                )
            ]
        )

        assert "Name" in table
        assert "proposal → tasks" in table
        assert "package" in table

    def test_templates_table(self) -> None:
        table = format_templates_table({"proposal": "/s/templates/proposal.md"})

        assert "Artifact" in table
        assert "/s/templates/proposal.md" in table


class TestSchemaResolutionText:
    def test_with_shadows(self) -> None:
        resolution = SchemaResolution(
            name="spec-driven",
            source=SchemaSource.PROJECT,
            path=Path("/p/openspec/schemas/spec-driven"),
            shadows=(SchemaShadow(SchemaSource.PACKAGE, Path("/pkg/spec-driven")),),
        )

        assert format_schema_resolution_text(resolution) == "\n".join(
            [
                "Schema: spec-driven",
                "Source: project",
                "Path: /p/openspec/schemas/spec-driven",
                "",
                "Shadows:",
                "  package: /pkg/spec-driven",
            ]
        )

    def test_grouped_listing(self) -> None:
        resolutions = [
            SchemaResolution("mini", SchemaSource.USER, Path("/u/mini")),
            SchemaResolution(
                "spec-driven",
                SchemaSource.PROJECT,
                Path("/p/spec-driven"),
                (SchemaShadow(SchemaSource.PACKAGE, Path("/pkg/spec-driven")),),
            ),
        ]

        assert format_schema_resolutions_text(resolutions) == (
            "Project schemas:\n  spec-driven (shadows: package)\n\nUser schemas:\n  mini"
        )

    def test_empty_listing(self) -> None:
        assert format_schema_resolutions_text([]) == "No schemas found."
