"""
Error taxonomy for project generation.

Every failure is fatal. Component errors propagate up to the
orchestrator, which re-raises them as a single ``GenerationError``
chained to the original cause.
"""

from __future__ import annotations


class ConfigError(Exception):
    """Raised when the descriptor file is missing or invalid."""


class ConfigResolutionError(Exception):
    """Raised when a config set references an unknown reusable config set."""

    def __init__(self, reference: str):
        self.reference = reference
        super().__init__(f"ConfigSet {reference} not found among reusable config sets.")


class CommandError(Exception):
    """Raised when an external generation command fails."""

    def __init__(self, message: str, exit_code: int | None = None):
        self.exit_code = exit_code
        super().__init__(message)


class ManifestError(Exception):
    """Raised when a generated pom.xml cannot be read or written."""


class OutputDirectoryError(Exception):
    """Raised when the output root cannot be created."""


class GenerationError(Exception):
    """Terminal failure of a generation run."""
