"""Detached re-execution of a pass.

The outer invocation does no work itself: it starts ``python -m homereap``
again with a sentinel argument in a new session, with output going to a
fresh log file, and returns immediately.
"""

import logging
import subprocess
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

# First positional argument that marks the detached child
CHILD_SENTINEL = "__homereap_child__"


def child_command() -> list[str]:
    """Return the argument vector of the detached child."""
    return [sys.executable, "-m", "homereap", CHILD_SENTINEL]


def launch_detached(log_path: Path) -> int:
    """Start the pass as a detached child logging to ``log_path``.

    The child gets its own session so it survives the invoking terminal;
    stdin is /dev/null and stdout/stderr both go to the log file.

    Args:
        log_path: Log file to create for this run.

    Returns:
        PID of the child process.

    Raises:
        OSError: If the log file cannot be opened or the child cannot start.
    """
    with open(log_path, "ab") as log_file:
        process = subprocess.Popen(  # nosec: B603
            child_command(),
            stdin=subprocess.DEVNULL,
            stdout=log_file,
            stderr=subprocess.STDOUT,
            start_new_session=True,
            close_fds=True,
        )
    logger.debug("Started detached child %d logging to %s", process.pid, log_path)
    return process.pid
