"""Base class for command-driven operators.

This module defines the CommandOperator that the unmount and process
operators build on: dry-run support, uniform logging and conversion of
execution failures into failed results.
"""

import logging
import subprocess
from abc import ABC, abstractmethod

from homereap.utils.shell import CommandResult, format_command, run_command

logger = logging.getLogger(__name__)

# Conventional shell exit codes for commands that never ran
EXIT_NOT_EXECUTABLE = 126
EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124


class CommandOperator(ABC):
    """Abstract base class for operators that run system commands.

    Operator methods never raise for a failing or missing command: the
    failure comes back as a CommandResult with a non-zero return code so
    callers can record it and move on.

    Attributes:
        dry_run: If True, destructive commands are logged, not executed.

    Example:
        >>> unmounter = Unmounter(dry_run=True)
        >>> unmounter.unmount("/home/alice", recursive=True).success
        True
    """

    def __init__(self, dry_run: bool = False, timeout: float = 60.0) -> None:
        """Initialize the operator.

        Args:
            dry_run: If True, only log destructive commands.
            timeout: Timeout in seconds for each command.
        """
        self._dry_run = dry_run
        self._timeout = timeout

    @property
    def dry_run(self) -> bool:
        """Check if operator is in dry-run mode."""
        return self._dry_run

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the underlying tools are available on the system.

        Returns:
            True if the operator can be used, False otherwise.
        """

    def _execute(self, args: list[str], *, destructive: bool = True) -> CommandResult:
        """Run a command, honouring dry-run for destructive ones.

        Args:
            args: Command and arguments.
            destructive: Whether the command changes system state.

        Returns:
            CommandResult; execution failures map to 124/126/127.
        """
        command = format_command(args)

        if destructive and self._dry_run:
            logger.info("Dry-run: would run %s", command)
            return CommandResult(stdout="", stderr="", returncode=0)

        logger.info("Running %s", command)
        try:
            result = run_command(args, timeout=self._timeout)
        except FileNotFoundError as e:
            logger.warning("Command not found: %s (%s)", args[0], e)
            return CommandResult(stdout="", stderr=str(e), returncode=EXIT_NOT_FOUND)
        except subprocess.TimeoutExpired:
            logger.warning("Command timed out after %.0fs: %s", self._timeout, command)
            return CommandResult(
                stdout="",
                stderr=f"timed out after {self._timeout:.0f}s",
                returncode=EXIT_TIMEOUT,
            )
        except OSError as e:
            logger.warning("Command could not be executed: %s (%s)", command, e)
            return CommandResult(stdout="", stderr=str(e), returncode=EXIT_NOT_EXECUTABLE)

        if not result.success:
            logger.info(
                "%s exited with status %d: %s",
                args[0],
                result.returncode,
                result.stderr.strip() or "(no error output)",
            )
        return result
