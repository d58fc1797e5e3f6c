"""
Logging configuration — one setup call for the projgen CLI.

Every module logs through ``logging.getLogger(__name__)``. External
generation tools (mvn, jbang) have their captured output forwarded to
the ``projgen.adapters.shell.command`` logger as one block per stream,
so console formats keep the logger name visible from INFO upwards.

Level precedence:
    --debug  >  --verbose  >  --quiet  >  PROJGEN_LOG_LEVEL  >  WARNING

Optional file output via PROJGEN_LOG_FILE / PROJGEN_LOG_FILE_LEVEL.
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LEVEL = "PROJGEN_LOG_LEVEL"
ENV_FILE = "PROJGEN_LOG_FILE"
ENV_FILE_LEVEL = "PROJGEN_LOG_FILE_LEVEL"

_FORMATS = {
    # (format, datefmt) by the most verbose level they apply to
    logging.DEBUG: ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%H:%M:%S"),
    logging.INFO: ("%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
    logging.WARNING: ("%(levelname)s: %(message)s", None),
}

_FILE_FORMAT = ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%Y-%m-%d %H:%M:%S")


def resolve_level(debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Pick the console level name from CLI flags and the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LEVEL, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Configure the root logger for the whole process.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional log file path; defaults to ``PROJGEN_LOG_FILE``.
        log_file_level: Level for the log file; defaults to
            ``PROJGEN_LOG_FILE_LEVEL``, then to ``level``.
    """
    numeric_level = _parse_level(level)
    log_file = log_file or os.environ.get(ENV_FILE)
    log_file_level = log_file_level or os.environ.get(ENV_FILE_LEVEL)

    fmt, datefmt = _console_format(numeric_level)
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    effective_level = numeric_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else numeric_level
        effective_level = min(effective_level, file_level)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(*_FILE_FORMAT))
        root.addHandler(fh)

    root.setLevel(effective_level)

    # Don't propagate exceptions from logging itself
    logging.raiseExceptions = False


def _console_format(numeric_level: int) -> tuple[str, str | None]:
    for threshold in sorted(_FORMATS):
        if numeric_level <= threshold:
            return _FORMATS[threshold]
    return _FORMATS[logging.WARNING]


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
