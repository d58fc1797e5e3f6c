"""Adapters — bindings to the external tools that generate projects.

Public re-exports for convenient access.
"""

from projgen.adapters.shell.command import execute_command

__all__ = [
    "execute_command",
]
