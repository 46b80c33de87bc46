"""Process holder discovery and signalling.

Lists processes holding files open under a mountpoint with two
independent tools (``fuser`` and ``lsof``), signals them with ``fuser -k``
and lists what an account still runs with ``ps``.
"""

import logging
from dataclasses import dataclass

from homereap.models.ladder import HolderScope, SignalSeverity
from homereap.operators.base import CommandOperator
from homereap.utils.shell import CommandResult, command_exists

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HolderReport:
    """Diagnostic listing of processes holding a path open.

    Neither listing is authoritative; both are kept for cross-checking.

    Attributes:
        path: Path that was inspected.
        fuser: Result of the ``fuser`` listing.
        lsof: Result of the ``lsof`` listing.
    """

    path: str
    fuser: CommandResult
    lsof: CommandResult

    @property
    def any_holders(self) -> bool:
        """Check if either tool reported an open handle.

        fuser exits 0 only when it found at least one process.
        """
        return self.fuser.returncode == 0 or bool(_lsof_rows(self.lsof))


def _lsof_rows(result: CommandResult) -> list[str]:
    """Return lsof output lines without the header."""
    return [line for line in result.stdout.splitlines()[1:] if line.strip()]


def _log_lines(title: str, text: str) -> None:
    for line in text.splitlines():
        if line.strip():
            logger.info("%s: %s", title, line.rstrip())


class ProcessReaper(CommandOperator):
    """Operator that finds and signals processes holding a mountpoint.

    Listing methods always run, even in dry-run mode; only signalling is
    suppressed by dry-run.
    """

    def is_available(self) -> bool:
        """Check if fuser is available (lsof and ps are optional)."""
        return command_exists("fuser")

    def report_holders(self, path: str) -> HolderReport:
        """Log the processes holding files open under ``path``.

        Purely informational: failures and empty listings are logged and
        returned, never raised.

        Args:
            path: Mountpoint to inspect.

        Returns:
            HolderReport with both listings.
        """
        fuser = self._execute(["fuser", "-v", "-m", "-M", path], destructive=False)
        # fuser -v writes its table to stderr
        _log_lines("fuser", fuser.stderr if fuser.returncode in (0, 1) else "")

        lsof = self._execute(["lsof", "-w", path], destructive=False)
        _log_lines("lsof", lsof.stdout)

        report = HolderReport(path=path, fuser=fuser, lsof=lsof)
        if not report.any_holders:
            logger.info("No open handles reported under %s", path)
        return report

    def signal(self, path: str, severity: SignalSeverity, scope: HolderScope) -> CommandResult:
        """Send a signal to processes holding ``path``.

        An empty match is a success, not an error.

        Args:
            path: Mountpoint whose holders are signalled.
            severity: Signal to send.
            scope: WRITE for write-access holders only, ANY for all holders.

        Returns:
            CommandResult; return code 0 when nothing matched.
        """
        args = ["fuser", "-k", f"-{severity.value}"]
        if scope == HolderScope.WRITE:
            args.append("-w")
        args.extend(["-m", "-M", path])

        logger.info(
            "Sending SIG%s to %s holders of %s",
            severity.value,
            scope.value,
            path,
        )
        result = self._execute(args)

        if self._no_match(result, path):
            logger.info("No matching processes for SIG%s under %s", severity.value, path)
            return CommandResult(stdout=result.stdout, stderr=result.stderr, returncode=0)
        if result.success and result.stdout.strip():
            logger.info("Signalled PIDs: %s", " ".join(result.stdout.split()))
        return result

    def report_account_processes(self, account: str) -> list[str]:
        """Log and return the processes an account still runs.

        Args:
            account: Account name.

        Returns:
            ps output lines without the header; empty if none or on failure.
        """
        result = self._execute(
            ["ps", "-o", "pid,stat,etime,args", "-u", account],
            destructive=False,
        )
        lines = [line for line in result.stdout.splitlines()[1:] if line.strip()]

        if result.returncode not in (0, 1):
            logger.warning(
                "Could not list processes of %s: %s",
                account,
                result.stderr.strip() or f"exit status {result.returncode}",
            )
            return []

        if lines:
            logger.info("%d process(es) still running as %s", len(lines), account)
            _log_lines(f"ps {account}", "\n".join(lines))
        else:
            logger.info("No processes left running as %s", account)
        return lines

    @staticmethod
    def _no_match(result: CommandResult, path: str) -> bool:
        """Check if a failed fuser call only means 'nothing matched'."""
        if result.returncode != 1 or result.stdout.strip():
            return False
        return result.stderr.strip() in ("", f"{path}:")
