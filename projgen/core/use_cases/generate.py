"""
Generate use case — load descriptors, select, and generate projects.

This is the vertical slice behind ``projgen generate`` and
``projgen plan``: load projgen.yml, turn CLI selections into an
``ActivationContext`` and ``GenerationSettings``, then either plan
(build commands only) or run the orchestrator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from projgen.adapters.shell.command import execute_command
from projgen.core.config.loader import find_descriptor_file, jbang_executable, load_descriptors
from projgen.core.engine.orchestrator import (
    CommandRunner,
    GenerationReport,
    PlannedProject,
    generate_projects,
    plan_projects,
)
from projgen.core.errors import ConfigError, ConfigResolutionError, GenerationError
from projgen.core.models.activation import (
    DEFAULT_COMMAND_TIMEOUT,
    ActivationContext,
    ActivationPolicy,
    DescriptorSet,
    GenerationSettings,
)
from projgen.core.services.activation import iter_active_pairs, resolve_config_sets

logger = logging.getLogger(__name__)


@dataclass
class GenerateResult:
    """Result of a generate or plan run."""

    config_path: Path | None = None
    dry_run: bool = False
    planned: list[PlannedProject] = field(default_factory=list)
    report: GenerationReport | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result

        result["config_path"] = str(self.config_path)
        result["dry_run"] = self.dry_run
        if self.report:
            result["report"] = self.report.to_dict()
        else:
            result["planned"] = [p.to_dict() for p in self.planned]
        return result


def build_context(
    descriptors: DescriptorSet,
    definitions: list[str] | None = None,
    structures: list[str] | None = None,
    config_sets: list[str] | None = None,
    policy: ActivationPolicy = ActivationPolicy.ALL,
) -> ActivationContext:
    """Turn selections into an activation context."""
    return ActivationContext(
        active_definitions=frozenset(definitions or ()),
        active_structures=frozenset(structures or ()),
        active_config_sets=frozenset(config_sets or ()),
        reusable_config_sets=tuple(descriptors.reusable_config_sets),
        policy=policy,
    )


def build_settings(
    descriptors: DescriptorSet,
    output_directory: Path,
    jbang: str | None = None,
    maven_settings: Path | None = None,
    local_repository: Path | None = None,
    timeout: float = DEFAULT_COMMAND_TIMEOUT,
) -> GenerationSettings:
    """Settings for a run; an explicit jbang path beats the descriptor property."""
    return GenerationSettings(
        output_directory=output_directory,
        jbang_executable=jbang or jbang_executable(descriptors),
        maven_settings=maven_settings,
        local_repository=local_repository,
        timeout=timeout,
    )


def generate(
    output_directory: Path,
    config_path: Path | None = None,
    definitions: list[str] | None = None,
    structures: list[str] | None = None,
    config_sets: list[str] | None = None,
    policy: ActivationPolicy = ActivationPolicy.ALL,
    jbang: str | None = None,
    maven_settings: Path | None = None,
    local_repository: Path | None = None,
    timeout: float = DEFAULT_COMMAND_TIMEOUT,
    dry_run: bool = False,
    run: CommandRunner | None = None,
) -> GenerateResult:
    """Generate (or, with ``dry_run``, only plan) the selected projects.

    Returns:
        GenerateResult; ``error`` is set instead of raising.
    """
    result = GenerateResult(dry_run=dry_run)

    # ── Load descriptors ────────────────────────────────────────
    try:
        if config_path is None:
            config_path = find_descriptor_file()
        descriptors = load_descriptors(config_path)
        result.config_path = config_path
    except ConfigError as e:
        result.error = str(e)
        return result

    context = build_context(descriptors, definitions, structures, config_sets, policy)
    settings = build_settings(
        descriptors,
        output_directory,
        jbang=jbang,
        maven_settings=maven_settings,
        local_repository=local_repository,
        timeout=timeout,
    )

    # ── Plan only ───────────────────────────────────────────────
    if dry_run:
        try:
            for definition, structure in iter_active_pairs(
                descriptors.definitions, descriptors.structures, context,
            ):
                resolve_config_sets(definition, structure, context)
            result.planned = plan_projects(descriptors, context, settings)
        except (ConfigResolutionError, GenerationError) as e:
            result.error = str(e)
        return result

    # ── Generate ────────────────────────────────────────────────
    try:
        result.report = generate_projects(
            descriptors, context, settings, run=run or execute_command,
        )
    except GenerationError as e:
        logger.debug("Generation failed", exc_info=True)
        result.error = str(e)
        return result

    result.planned = list(result.report.projects)
    return result
