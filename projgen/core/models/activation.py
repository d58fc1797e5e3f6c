"""
Activation and run models — which descriptors take part in a run.

``DescriptorSet`` is the loaded descriptor file. ``ActivationContext``
is the run-scoped selection passed explicitly to the resolvers and the
orchestrator. ``GenerationSettings`` holds everything about *where* and
*with which executables* generation happens.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator

from projgen.core.models.descriptor import (
    ConfigSet,
    ProjectDefinition,
    ProjectStructure,
    Properties,
)

# Project property that overrides the jbang launcher path
JBANG_EXECUTABLE_PROPERTY = "jbang.executable"

DEFAULT_JBANG_EXECUTABLE = "jbang"
DEFAULT_MAVEN_EXECUTABLE = "mvn"
DEFAULT_COMMAND_TIMEOUT = 600  # seconds


class ActivationPolicy(str, Enum):
    """What an empty set of active definitions/structures means."""

    ALL = "all"
    NONE = "none"


class DescriptorSet(BaseModel):
    """Everything declared in a descriptor file."""

    definitions: list[ProjectDefinition] = Field(default_factory=list)
    structures: list[ProjectStructure] = Field(default_factory=list)
    reusable_config_sets: list[ConfigSet] = Field(default_factory=list)
    properties: Properties = Field(default_factory=dict)

    @model_validator(mode="after")
    def _unique_ids(self) -> DescriptorSet:
        for label, items in (
            ("definition", self.definitions),
            ("structure", self.structures),
        ):
            ids = [item.id for item in items]
            dupes = sorted({i for i in ids if ids.count(i) > 1})
            if dupes:
                raise ValueError(f"Duplicate {label} ids: {', '.join(dupes)}")
        return self


class ActivationContext(BaseModel):
    """Run-scoped activation state.

    Active definitions and structures are *expressions*: an entry matches
    an id either literally or as a full regular-expression match. Active
    config sets are plain ids.
    """

    model_config = ConfigDict(frozen=True)

    active_definitions: frozenset[str] = frozenset()
    active_structures: frozenset[str] = frozenset()
    active_config_sets: frozenset[str] = frozenset()
    reusable_config_sets: tuple[ConfigSet, ...] = ()
    policy: ActivationPolicy = ActivationPolicy.ALL


class GenerationSettings(BaseModel):
    """Where generated projects go and which tools produce them."""

    model_config = ConfigDict(frozen=True)

    output_directory: Path
    jbang_executable: str = DEFAULT_JBANG_EXECUTABLE
    maven_executable: str = DEFAULT_MAVEN_EXECUTABLE
    maven_settings: Path | None = None
    local_repository: Path | None = None
    timeout: float = DEFAULT_COMMAND_TIMEOUT
