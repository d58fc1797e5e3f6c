"""
Descriptor models — what to generate and how to generate it.

A ``ProjectDefinition`` carries the naming half (coordinates, package),
a ``ProjectStructure`` carries the generation half (which tool to run)
plus shared configuration. ``ConfigSet`` bundles are attached to both
and end up patched into the generated ``pom.xml``.

Descriptors are frozen once loaded: the orchestrator only ever changes
files on disk, never these objects.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _stringify(value: object) -> object:
    # YAML turns 3.0 or true into numbers and booleans; Maven wants text
    if not isinstance(value, dict):
        return value
    return {
        str(k): str(v).lower() if isinstance(v, bool) else ("" if v is None else str(v))
        for k, v in value.items()
    }


Properties = Annotated[dict[str, str], BeforeValidator(_stringify)]


def _as_text(value: object) -> object:
    return str(value) if isinstance(value, (int, float)) and not isinstance(value, bool) else value


# Unquoted versions such as 1.0 arrive as floats
Version = Annotated[str, BeforeValidator(_as_text)]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Artifact(_Frozen):
    """Maven coordinates (archetype, platform BOM)."""

    group_id: str
    artifact_id: str
    version: Version

    @property
    def gav(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"


class Exclusion(_Frozen):
    group_id: str
    artifact_id: str


class Dependency(_Frozen):
    """A dependency declaration appended to the generated pom.xml."""

    group_id: str
    artifact_id: str
    version: Version | None = None
    type: str | None = None
    classifier: str | None = None
    scope: str | None = None
    optional: bool | None = None
    exclusions: list[Exclusion] = Field(default_factory=list)


class ConfigSet(_Frozen):
    """A named bundle of dependencies and properties.

    When ``reusable_config`` is set, the bundle is only a reference:
    the actual content comes from the reusable config set with that id.
    """

    id: str = ""
    reusable_config: str | None = None
    dependencies: list[Dependency] = Field(default_factory=list)
    properties: Properties = Field(default_factory=dict)


# ── Generation methods ──────────────────────────────────────────


class MavenPluginConfig(_Frozen):
    group_id: str
    artifact_id: str
    version: Version
    goal: str


class ArchetypeGenerate(_Frozen):
    """Generate by running ``archetype:generate``."""

    type: Literal["archetype"] = "archetype"
    archetype: Artifact
    properties: Properties = Field(default_factory=dict)


class QuarkusCliGenerate(_Frozen):
    """Generate with ``quarkus create app`` launched through jbang."""

    type: Literal["quarkus-cli"] = "quarkus-cli"
    quarkus_extensions: str = ""
    quarkus_platform_gav: Artifact | None = None
    properties: Properties = Field(default_factory=dict)


class MavenPluginGenerate(_Frozen):
    """Generate by invoking a Maven plugin goal directly."""

    type: Literal["maven-plugin"] = "maven-plugin"
    maven_plugin_config: MavenPluginConfig
    quarkus_platform_gav: Artifact | None = None
    properties: Properties = Field(default_factory=dict)


Generate = Annotated[
    Union[ArchetypeGenerate, QuarkusCliGenerate, MavenPluginGenerate],
    Field(discriminator="type"),
]


# ── Definition / structure ──────────────────────────────────────


class ProjectDefinition(_Frozen):
    """What to generate: identity and coordinates of the project."""

    id: str
    group_id: str
    artifact_id: str
    package_name: str
    final_name: str | None = None
    config: ConfigSet = Field(default_factory=ConfigSet)


class ProjectStructure(_Frozen):
    """How to generate: the generation method plus shared config."""

    id: str
    generate: Generate
    common_config: ConfigSet = Field(default_factory=ConfigSet)
    config_sets: list[ConfigSet] = Field(default_factory=list)
