"""Text renderers for workflow command output.

JSON output goes through ``format_json`` on the models' ``to_dict``; the
functions here produce the human and agent readable text forms.
"""

from openspec.artifact_graph import (
    ApplyInstructions,
    ApplyState,
    ArtifactInstructions,
    ArtifactStatus,
    ChangeStatus,
    SchemaInfo,
    SchemaResolution,
    SchemaSource,
)

from ._shared import format_table

_STATUS_INDICATORS: dict[ArtifactStatus, str] = {
    ArtifactStatus.DONE: "[x]",
    ArtifactStatus.READY: "[ ]",
    ArtifactStatus.BLOCKED: "[-]",
}


def format_change_status_text(status: ChangeStatus) -> str:
    """Render a change's artifact status as a checklist."""
    lines = [
        f"Change: {status.change_name}",
        f"Schema: {status.schema_name}",
        f"Progress: {status.done_count}/{len(status.artifacts)} artifacts complete",
        "",
    ]
    for artifact in status.artifacts:
        line = f"{_STATUS_INDICATORS[artifact.status]} {artifact.id}"
        if artifact.status is ArtifactStatus.BLOCKED and artifact.missing_deps:
            line += f" (blocked by: {', '.join(artifact.missing_deps)})"
        lines.append(line)

    if status.is_complete:
        lines.extend(["", "All artifacts complete!"])
    return "\n".join(lines)


def format_artifact_instructions_text(instructions: ArtifactInstructions) -> str:
    """Render artifact instructions as tagged sections for an agent.

    Project context and rules are kept in their own sections, apart from
    the template the agent fills in.
    """
    change_dir = instructions.change_dir
    lines = [
        f'<artifact id="{instructions.artifact_id}" '
        f'change="{instructions.change_name}" '
        f'schema="{instructions.schema_name}">',
        "",
    ]

    missing = [dep.id for dep in instructions.dependencies if not dep.done]
    if missing:
        lines.extend(
            [
                "<warning>",
                "This artifact has unmet dependencies. "
                "Complete them first or proceed with caution.",
                f"Missing: {', '.join(missing)}",
                "</warning>",
                "",
            ]
        )

    lines.extend(
        [
            "<task>",
            f"Create the {instructions.artifact_id} artifact "
            f'for change "{instructions.change_name}".',
            instructions.description,
            "</task>",
            "",
        ]
    )

    if instructions.context is not None:
        lines.extend(
            [
                "<project_context>",
                "<!-- Background information. Do NOT include this in your output. -->",
                instructions.context.rstrip(),
                "</project_context>",
                "",
            ]
        )

    if instructions.rules is not None:
        lines.append("<rules>")
        lines.append("<!-- Constraints to follow. Do NOT include this in your output. -->")
        lines.extend(f"- {rule}" for rule in instructions.rules)
        lines.extend(["</rules>", ""])

    if instructions.dependencies:
        lines.extend(
            [
                "<dependencies>",
                "Read these files for context before creating this artifact:",
                "",
            ]
        )
        for dep in instructions.dependencies:
            status = "done" if dep.done else "missing"
            lines.extend(
                [
                    f'<dependency id="{dep.id}" status="{status}">',
                    f"  <path>{change_dir / dep.path}</path>",
                    f"  <description>{dep.description}</description>",
                    "</dependency>",
                ]
            )
        lines.extend(["</dependencies>", ""])

    lines.extend(
        [
            "<output>",
            f"Write to: {change_dir / instructions.output_path}",
            "</output>",
            "",
        ]
    )

    if instructions.instruction is not None and instructions.instruction.strip():
        lines.extend(
            ["<instruction>", instructions.instruction.strip(), "</instruction>", ""]
        )

    lines.extend(
        [
            "<template>",
            "<!-- Use this as the structure for your output file. Fill in the sections. -->",
            instructions.template.strip(),
            "</template>",
            "",
        ]
    )

    if instructions.unlocks:
        lines.extend(
            [
                "<unlocks>",
                f"Completing this artifact enables: {', '.join(instructions.unlocks)}",
                "</unlocks>",
                "",
            ]
        )

    lines.append("</artifact>")
    return "\n".join(lines)


def format_apply_instructions_text(instructions: ApplyInstructions) -> str:
    """Render apply-phase state as markdown."""
    lines = [
        f"## Apply: {instructions.change_name}",
        f"Schema: {instructions.schema_name}",
        "",
    ]

    if instructions.state is ApplyState.BLOCKED and instructions.missing_artifacts:
        lines.extend(
            [
                "### Blocked",
                "",
                f"Missing artifacts: {', '.join(instructions.missing_artifacts)}",
                "",
            ]
        )

    if instructions.context_files:
        lines.append("### Context Files")
        lines.extend(
            f"- {artifact_id}: {path}"
            for artifact_id, path in instructions.context_files.items()
        )
        lines.append("")

    progress = instructions.progress
    if progress.total > 0:
        suffix = " ✓" if instructions.state is ApplyState.ALL_DONE else ""
        lines.extend(
            ["### Progress", f"{progress.complete}/{progress.total} complete{suffix}", ""]
        )

        lines.append("### Tasks")
        lines.extend(
            f"- {'[x]' if task.done else '[ ]'} {task.description}"
            for task in instructions.tasks
        )
        lines.append("")

    lines.extend(["### Instruction", instructions.instruction])
    return "\n".join(lines)


def format_schemas_table(schemas: list[SchemaInfo]) -> str:
    """Render available schemas as a Markdown table."""
    rows = [
        [
            schema.name,
            schema.source.value,
            " → ".join(schema.artifacts),
            schema.description,
        ]
        for schema in schemas
    ]
    return format_table(["Name", "Source", "Artifacts", "Description"], rows)


def format_templates_table(templates: dict[str, str]) -> str:
    """Render artifact template paths as a Markdown table."""
    rows = [[artifact_id, path] for artifact_id, path in templates.items()]
    return format_table(["Artifact", "Template"], rows)


def format_schema_resolution_text(resolution: SchemaResolution) -> str:
    lines = [
        f"Schema: {resolution.name}",
        f"Source: {resolution.source.value}",
        f"Path: {resolution.path}",
    ]
    if resolution.shadows:
        lines.extend(["", "Shadows:"])
        lines.extend(
            f"  {shadow.source.value}: {shadow.path}" for shadow in resolution.shadows
        )
    return "\n".join(lines)


_SOURCE_HEADINGS: dict[SchemaSource, str] = {
    SchemaSource.PROJECT: "Project schemas:",
    SchemaSource.USER: "User schemas:",
    SchemaSource.PACKAGE: "Package schemas:",
}


def format_schema_resolutions_text(resolutions: list[SchemaResolution]) -> str:
    """Render every schema grouped by the tier that supplies it."""
    if not resolutions:
        return "No schemas found."

    sections: list[str] = []
    for source, heading in _SOURCE_HEADINGS.items():
        group = [r for r in resolutions if r.source is source]
        if not group:
            continue
        lines = [heading]
        for resolution in group:
            line = f"  {resolution.name}"
            if resolution.shadows:
                shadowed = ", ".join(s.source.value for s in resolution.shadows)
                line += f" (shadows: {shadowed})"
            lines.append(line)
        sections.append("\n".join(lines))
    return "\n\n".join(sections)
