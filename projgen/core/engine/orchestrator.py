"""
Engine orchestrator — the generation loop.

For every active (definition, structure) pair, in order:

    build command → run it in the output root → patch pom.xml
    (dependencies, finalName, properties; one load/save cycle each)

Every active pair needs a project directory of its own; pairs that would
share one are rejected before anything runs.

The run is fail-fast: the first error of any pair aborts the run and
surfaces as a single ``GenerationError`` chained to its cause.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from projgen.adapters.shell.command import execute_command
from projgen.core.errors import GenerationError, OutputDirectoryError
from projgen.core.models.activation import (
    ActivationContext,
    DescriptorSet,
    GenerationSettings,
)
from projgen.core.models.descriptor import ProjectDefinition, ProjectStructure
from projgen.core.services.activation import iter_active_pairs, resolve_config_sets
from projgen.core.services.generators import build_command, target_project_name
from projgen.core.services.manifest import (
    POM_FILE,
    add_dependencies,
    merge_properties,
    mutate_manifest,
    set_final_name,
)

logger = logging.getLogger(__name__)

CommandRunner = Callable[[str, Path, float], None]


@dataclass
class PlannedProject:
    """One active pair and the command that generates it."""

    definition_id: str
    structure_id: str
    generate_type: str
    command: str
    project_dir: Path

    def to_dict(self) -> dict:
        return {
            "definition": self.definition_id,
            "structure": self.structure_id,
            "type": self.generate_type,
            "command": self.command,
            "project_dir": str(self.project_dir),
        }


@dataclass
class GenerationReport:
    """Projects produced by a run, in generation order."""

    output_directory: Path | None = None
    projects: list[PlannedProject] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.projects)

    def to_dict(self) -> dict:
        return {
            "output_directory": str(self.output_directory),
            "total": self.total,
            "projects": [p.to_dict() for p in self.projects],
        }


def project_directory(
    output_directory: Path,
    definition: ProjectDefinition,
    structure: ProjectStructure,
) -> Path:
    """Directory the generated project of a pair lives in."""
    return output_directory / target_project_name(definition, structure)


def plan_projects(
    descriptors: DescriptorSet,
    context: ActivationContext,
    settings: GenerationSettings,
) -> list[PlannedProject]:
    """Active pairs with their commands, without running anything.

    Raises:
        GenerationError: If two active pairs share a project directory.
    """
    return [planned for _, _, planned in _plan_pairs(descriptors, context, settings)]


def _plan_pairs(
    descriptors: DescriptorSet,
    context: ActivationContext,
    settings: GenerationSettings,
) -> list[tuple[ProjectDefinition, ProjectStructure, PlannedProject]]:
    pairs = [
        (definition, structure, _plan(definition, structure, settings))
        for definition, structure in iter_active_pairs(
            descriptors.definitions, descriptors.structures, context,
        )
    ]
    _check_exclusive_directories([planned for _, _, planned in pairs])
    return pairs


def _check_exclusive_directories(planned: list[PlannedProject]) -> None:
    owners: dict[Path, PlannedProject] = {}
    for project in planned:
        owner = owners.setdefault(project.project_dir, project)
        if owner is not project:
            raise GenerationError(
                f"Pairs '{owner.definition_id}' × '{owner.structure_id}' and"
                f" '{project.definition_id}' × '{project.structure_id}' would both"
                f" generate into {project.project_dir}; activate only one of them"
            )


def _plan(
    definition: ProjectDefinition,
    structure: ProjectStructure,
    settings: GenerationSettings,
) -> PlannedProject:
    return PlannedProject(
        definition_id=definition.id,
        structure_id=structure.id,
        generate_type=structure.generate.type,
        command=build_command(definition, structure, settings),
        project_dir=project_directory(settings.output_directory, definition, structure),
    )


def generate_projects(
    descriptors: DescriptorSet,
    context: ActivationContext,
    settings: GenerationSettings,
    run: CommandRunner = execute_command,
) -> GenerationReport:
    """Generate and patch a project for every active pair.

    Args:
        descriptors: Loaded definitions and structures.
        context: Activation selection and reusable config sets.
        settings: Output directory, executables, timeout.
        run: Command runner, ``execute_command`` unless overridden.

    Returns:
        GenerationReport listing every generated project.

    Raises:
        GenerationError: On the first failure, chained to its cause.
    """
    try:
        pairs = _plan_pairs(descriptors, context, settings)
    except GenerationError:
        raise
    except Exception as e:
        raise GenerationError(f"Error while generating projects: {e}") from e

    output_directory = settings.output_directory
    try:
        _ensure_output_directory(output_directory)
    except OutputDirectoryError as e:
        raise GenerationError(f"Error when creating base directory: {e}") from e

    report = GenerationReport(output_directory=output_directory)
    logger.info("Active definition expressions: %s", sorted(context.active_definitions))
    logger.info("Active structure expressions: %s", sorted(context.active_structures))

    try:
        for definition, structure, planned in pairs:
            logger.info(
                "About to generate using definition '%s' and structure '%s'",
                definition.id, structure.id,
            )
            run(planned.command, output_directory, settings.timeout)
            _patch_manifest(definition, structure, context, planned.project_dir / POM_FILE)
            report.projects.append(planned)
    except Exception as e:
        raise GenerationError(f"Error while generating projects: {e}") from e

    logger.info("Generated %d project(s) in %s", report.total, output_directory)
    return report


def _ensure_output_directory(path: Path) -> None:
    if path.is_dir():
        return
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputDirectoryError(f"Cannot create {path}: {e}") from e


def _patch_manifest(
    definition: ProjectDefinition,
    structure: ProjectStructure,
    context: ActivationContext,
    pom_path: Path,
) -> None:
    """Apply dependencies, finalName and properties to the generated pom."""
    config_sets = resolve_config_sets(definition, structure, context)
    mutate_manifest(pom_path, add_dependencies(config_sets))

    if definition.final_name:
        mutate_manifest(pom_path, set_final_name(definition.final_name))
    else:
        logger.debug("No finalName specified, not changing build configuration.")

    mutate_manifest(pom_path, merge_properties(config_sets))
