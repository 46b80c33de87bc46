"""Logging setup for the detached run."""

import logging
import sys
from typing import TextIO

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO", stream: TextIO | None = None) -> None:
    """Send all log records to one stream with timestamps.

    The detached child's stderr is the run's log file, so this is the only
    handler a pass needs.

    Args:
        level: Logging level name.
        stream: Target stream (defaults to stderr).
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=stream or sys.stderr,
        force=True,
    )
