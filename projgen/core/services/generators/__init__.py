"""
Generators — build the external commands that create projects.

Each generation method registers one command builder in
``commands.COMMAND_BUILDERS``; ``build_command()`` dispatches on the
structure's ``generate.type``.
"""

from projgen.core.services.generators.commands import (
    COMMAND_BUILDERS,
    build_command,
    target_project_name,
)

__all__ = [
    "COMMAND_BUILDERS",
    "build_command",
    "target_project_name",
]
