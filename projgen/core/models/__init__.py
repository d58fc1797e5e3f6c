"""
Domain models — Pydantic types for project generation.

All models are re-exported here for convenient access:

    from projgen.core.models import ProjectDefinition, ProjectStructure, ConfigSet
"""

from projgen.core.models.activation import (
    ActivationContext,
    ActivationPolicy,
    DescriptorSet,
    GenerationSettings,
)
from projgen.core.models.descriptor import (
    ArchetypeGenerate,
    Artifact,
    ConfigSet,
    Dependency,
    Exclusion,
    Generate,
    MavenPluginConfig,
    MavenPluginGenerate,
    ProjectDefinition,
    ProjectStructure,
    QuarkusCliGenerate,
)

__all__ = [
    # activation.py
    "ActivationContext",
    "ActivationPolicy",
    # descriptor.py
    "ArchetypeGenerate",
    "Artifact",
    "ConfigSet",
    "Dependency",
    "DescriptorSet",
    "Exclusion",
    "Generate",
    "GenerationSettings",
    "MavenPluginConfig",
    "MavenPluginGenerate",
    "ProjectDefinition",
    "ProjectStructure",
    "QuarkusCliGenerate",
]
