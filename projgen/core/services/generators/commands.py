"""
Generation commands — build the external command line for each method.

One builder per ``generate.type``, registered in ``COMMAND_BUILDERS``.
Builders are pure string construction over already-resolved fields:
no filesystem, no network. Every value taken from the descriptors is
shell-quoted, so the executor splits it back into a single argument.
Supporting a new generation method means
adding a ``Generate`` variant and registering one builder here.
"""

from __future__ import annotations

import shlex
from collections.abc import Callable

from projgen.core.models.activation import GenerationSettings
from projgen.core.models.descriptor import (
    ArchetypeGenerate,
    MavenPluginGenerate,
    ProjectDefinition,
    ProjectStructure,
    QuarkusCliGenerate,
)

CommandBuilder = Callable[[ProjectDefinition, ProjectStructure, GenerationSettings], str]

COMMAND_BUILDERS: dict[str, CommandBuilder] = {}

QUARKUS_CLI_ALIAS = "quarkus@quarkusio"


def command_builder(generate_type: str) -> Callable[[CommandBuilder], CommandBuilder]:
    """Register a builder for a ``generate.type``."""

    def register(func: CommandBuilder) -> CommandBuilder:
        COMMAND_BUILDERS[generate_type] = func
        return func

    return register


def target_project_name(definition: ProjectDefinition, structure: ProjectStructure) -> str:
    """Artifact id (and directory name) of the project generated for a pair.

    Shared by every command builder and by the manifest path lookup so
    that both always agree on where the project lives.
    """
    return definition.artifact_id


def build_command(
    definition: ProjectDefinition,
    structure: ProjectStructure,
    settings: GenerationSettings,
) -> str:
    """Build the generation command for a pair using its structure's method."""
    generate_type = structure.generate.type
    builder = COMMAND_BUILDERS.get(generate_type)
    if builder is None:
        raise ValueError(f"No command builder for generation type '{generate_type}'")
    return builder(definition, structure, settings)


@command_builder("archetype")
def archetype_command(
    definition: ProjectDefinition,
    structure: ProjectStructure,
    settings: GenerationSettings,
) -> str:
    """``mvn archetype:generate`` with the project coordinates as properties."""
    generate = structure.generate
    assert isinstance(generate, ArchetypeGenerate)

    properties = {
        "interactiveMode": "false",
        "groupId": definition.group_id,
        "artifactId": target_project_name(definition, structure),
        "package": definition.package_name,
        "archetypeVersion": generate.archetype.version,
        "archetypeGroupId": generate.archetype.group_id,
        "archetypeArtifactId": generate.archetype.artifact_id,
    }
    # Structure properties win over the fixed ones
    properties.update(generate.properties)
    if settings.local_repository is not None:
        properties["maven.repo.local"] = str(settings.local_repository)

    parts = [_quote(settings.maven_executable)]
    if settings.maven_settings is not None:
        parts.append(f"-s {_quote(settings.maven_settings)}")
    parts.append("archetype:generate")
    parts.extend(_define(key, value) for key, value in properties.items())
    return " ".join(parts)


@command_builder("quarkus-cli")
def quarkus_cli_command(
    definition: ProjectDefinition,
    structure: ProjectStructure,
    settings: GenerationSettings,
) -> str:
    """``jbang run quarkus@quarkusio create app ...``."""
    generate = structure.generate
    assert isinstance(generate, QuarkusCliGenerate)

    command = (
        f"{_quote(settings.jbang_executable)} run {QUARKUS_CLI_ALIAS}"
        f" create app"
        f" {_quote(f'{definition.group_id}:{target_project_name(definition, structure)}')}"
        f" -x {_quote(generate.quarkus_extensions)}"
        f" --package-name {_quote(definition.package_name)}"
        f" --batch-mode"
    )
    if generate.quarkus_platform_gav is not None:
        command += f" --platform-bom {_quote(generate.quarkus_platform_gav.gav)}"
    return command


@command_builder("maven-plugin")
def maven_plugin_command(
    definition: ProjectDefinition,
    structure: ProjectStructure,
    settings: GenerationSettings,
) -> str:
    """``mvn <plugin>:<goal>`` with project coordinates as ``-D`` flags."""
    generate = structure.generate
    assert isinstance(generate, MavenPluginGenerate)
    plugin = generate.maven_plugin_config

    command = (
        f"{_quote(settings.maven_executable)}"
        f" {_quote(f'{plugin.group_id}:{plugin.artifact_id}:{plugin.version}:{plugin.goal}')}"
        f" --batch-mode"
        f" {_define('projectGroupId', definition.group_id)}"
        f" {_define('projectArtifactId', target_project_name(definition, structure))}"
        f" {_define('packageName', definition.package_name)}"
    )
    platform = generate.quarkus_platform_gav
    if platform is not None:
        command += (
            f" {_define('platformGroupId', platform.group_id)}"
            f" {_define('platformArtifactId', platform.artifact_id)}"
            f" {_define('platformVersion', platform.version)}"
        )
    # Remaining plugin properties, e.g. noCode
    for key, value in generate.properties.items():
        command += f" {_define(key, value)}"
    return command


def _quote(value: object) -> str:
    return shlex.quote(str(value))


def _define(key: str, value: str) -> str:
    """A ``-Dkey=value`` flag that stays one argument after ``shlex.split``."""
    return f"-D{key}={_quote(value)}"
