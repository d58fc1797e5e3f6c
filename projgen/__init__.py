"""projgen — generate skeleton projects from declarative descriptors."""

__version__ = "0.1.0"
