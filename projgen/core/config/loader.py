"""
Configuration loader — reads projgen.yml into descriptor models.

This is the primary entry point for loading generation descriptors.
It reads YAML, validates against Pydantic schemas, and returns a
typed ``DescriptorSet``.

Expected layout::

    properties:
      jbang.executable: /opt/jbang/bin/jbang
    reusable_config_sets:
      - id: shared-1
        properties: {...}
    definitions:
      - id: demo
        group_id: org.acme
        artifact_id: demo
        package_name: org.acme.demo
    structures:
      - id: quarkus
        generate:
          type: quarkus-cli
          quarkus_extensions: resteasy
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from projgen.core.errors import ConfigError
from projgen.core.models.activation import (
    DEFAULT_JBANG_EXECUTABLE,
    JBANG_EXECUTABLE_PROPERTY,
    DescriptorSet,
)

logger = logging.getLogger(__name__)

# Default config filename
DESCRIPTOR_FILE = "projgen.yml"


def find_descriptor_file(start_dir: Path | None = None) -> Path | None:
    """Search for projgen.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to projgen.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / DESCRIPTOR_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_descriptors(path: Path | None = None) -> DescriptorSet:
    """Load and validate generation descriptors.

    Args:
        path: Explicit path to projgen.yml. If None, searches upward.

    Returns:
        Validated DescriptorSet.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if path is None:
        path = find_descriptor_file()

    if path is None:
        raise ConfigError(f"No {DESCRIPTOR_FILE} found. Specify one with --config.")

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading descriptors from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        descriptors = DescriptorSet.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid descriptors in {path}: {e}") from e

    logger.info(
        "Loaded %d definitions, %d structures, %d reusable config sets",
        len(descriptors.definitions),
        len(descriptors.structures),
        len(descriptors.reusable_config_sets),
    )
    return descriptors


def jbang_executable(descriptors: DescriptorSet) -> str:
    """The jbang launcher, honouring the ``jbang.executable`` property."""
    executable = descriptors.properties.get(JBANG_EXECUTABLE_PROPERTY)
    if executable:
        logger.info("Using custom jbang executable '%s'", executable)
        return executable
    return DEFAULT_JBANG_EXECUTABLE

