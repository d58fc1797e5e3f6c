"""
Shell command adapter — run a generation command and capture its output.

The command runs in the given working directory and is bounded by a
wall-clock timeout. Both output streams are drained in full, even on
failure, and forwarded to the log as one block each: stdout at INFO,
stderr at ERROR.

Every failure is raised as a ``CommandError``.
"""

from __future__ import annotations

import logging
import os
import shlex
import signal
import subprocess
import time
from pathlib import Path

from projgen.core.errors import CommandError
from projgen.core.models.activation import DEFAULT_COMMAND_TIMEOUT

logger = logging.getLogger(__name__)

# Seconds to collect output after a timed-out process was killed
_DRAIN_TIMEOUT = 5


def execute_command(
    command: str,
    work_dir: Path | str,
    timeout: float = DEFAULT_COMMAND_TIMEOUT,
) -> None:
    """Execute ``command`` in ``work_dir`` and wait for it to finish.

    Args:
        command: Full command line. Tokenised like a shell would, but not
            run through one.
        work_dir: Directory the process is started in.
        timeout: Seconds to wait before the process is killed.

    Raises:
        CommandError: On launch failure, timeout, or non-zero exit code.
    """
    work_dir = Path(work_dir)
    logger.info("About to execute '%s' in directory %s", command, work_dir.resolve())

    try:
        args = shlex.split(command)
    except ValueError as e:
        raise CommandError(f"Cannot parse command '{command}': {e}") from e

    start = time.monotonic()
    try:
        proc = subprocess.Popen(
            args,
            cwd=str(work_dir),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
            # Own process group, so a timeout can kill wrapper scripts and their children
            start_new_session=True,
        )
    except OSError as e:
        raise CommandError(f"Exception while invoking CLI: {e}") from e

    try:
        stdout, stderr = proc.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        _kill_process_group(proc)
        try:
            stdout, stderr = proc.communicate(timeout=_DRAIN_TIMEOUT)
        except subprocess.TimeoutExpired:
            # A detached descendant still holds the pipes
            stdout, stderr = None, None
            for stream in (proc.stdout, proc.stderr):
                if stream is not None:
                    stream.close()
            proc.wait()
        _forward_output(stdout, stderr)
        raise CommandError(
            f"CLI command didn't finish in time ({timeout:g}s): {command}"
        ) from None

    elapsed_ms = int((time.monotonic() - start) * 1000)
    _forward_output(stdout, stderr)

    if proc.returncode != 0:
        raise CommandError(
            f"CLI command ended with state {proc.returncode}",
            exit_code=proc.returncode,
        )

    logger.debug("Command finished in %dms: %s", elapsed_ms, command)


def _forward_output(stdout: str | None, stderr: str | None) -> None:
    """Log each non-empty stream as a single block."""
    out = (stdout or "").strip()
    if out:
        logger.info("%s", out)
    err = (stderr or "").strip()
    if err:
        logger.error("%s", err)


def _kill_process_group(proc: subprocess.Popen) -> None:
    """Kill the process and everything started in its session."""
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except (AttributeError, ProcessLookupError, PermissionError):
        # No process groups on this platform, or the group is gone already
        proc.kill()
