import os
import shutil
import logging
import subprocess

from typing import Optional, Sequence

from pipeline_harness.exceptions import LaunchError, ToolNotFoundError

logger = logging.getLogger(__name__)


def resolve_executable(name: str) -> str:
    """Locate *name* on PATH the way the shell would."""
    path = shutil.which(name)
    if path is None:
        raise ToolNotFoundError(name)
    return path


def exit_status(returncode: int) -> int:
    """Map a Popen return code to a shell exit status (signal N -> 128 + N)."""
    if returncode < 0:
        return 128 - returncode
    return returncode


def wait_foreground(process: subprocess.Popen) -> int:
    """Wait for *process*, riding out Ctrl-C while it shuts itself down."""
    while True:
        try:
            return process.wait()
        except KeyboardInterrupt:
            # the terminal delivers SIGINT to the child too; it decides when to exit
            logger.info("interrupted, waiting for pid %d to exit", process.pid)


def run_forwarded(argv: Sequence[str], cwd: Optional[str] = None) -> int:
    """Run argv in the foreground with inherited stdio and return its exit status."""
    if not argv:
        raise ValueError("empty command")

    executable = resolve_executable(argv[0])
    logger.debug("resolved %s -> %s", argv[0], executable)

    if cwd is not None:
        cwd = os.path.expanduser(cwd)
        logger.debug("working directory: %s", cwd)

    try:
        process = subprocess.Popen(list(argv), executable=executable, cwd=cwd)
    except OSError as e:
        where = f" in {cwd}" if cwd is not None else ""
        raise LaunchError(f"cannot run {argv[0]}{where}: {e.strerror}") from e

    status = exit_status(wait_foreground(process))
    logger.info("%s exited with %d", argv[0], status)
    return status
