"""Unit tests for ProcessReaper.

Tests for holder discovery, signalling and account process reports.
"""

from unittest.mock import patch

import pytest
from homereap.models.ladder import HolderScope, SignalSeverity
from homereap.operators.reaper import ProcessReaper
from homereap.utils.shell import CommandResult

FUSER_TABLE = """                     USER        PID ACCESS COMMAND
/home/alice:         root     kernel mount /home/alice
                     alice      4242 ..c.. bash
"""

LSOF_OUTPUT = """COMMAND  PID  USER   FD   TYPE DEVICE SIZE/OFF NODE NAME
bash    4242 alice  cwd    DIR   0,52        8   34 /home/alice
vim     4250 alice    4u   REG   0,52     4096   91 /home/alice/.notes.swp
"""


class TestReportHolders:
    """Tests for ProcessReaper.report_holders."""

    def test_runs_both_tools(self) -> None:
        """Both fuser and lsof are consulted."""
        with patch("homereap.operators.base.run_command") as mock_run:
            mock_run.side_effect = [
                CommandResult(stdout=" 4242c", stderr=FUSER_TABLE, returncode=0),
                CommandResult(stdout=LSOF_OUTPUT, stderr="", returncode=0),
            ]

            report = ProcessReaper().report_holders("/home/alice")

        commands = [c[0][0] for c in mock_run.call_args_list]
        assert commands[0][0] == "fuser"
        assert commands[1][0] == "lsof"
        assert report.any_holders is True

    def test_missing_tools_do_not_raise(self) -> None:
        """Missing diagnostic tools are tolerated."""
        with patch("homereap.operators.base.run_command", side_effect=FileNotFoundError("lsof")):
            report = ProcessReaper().report_holders("/home/alice")

        assert report.any_holders is False
        assert report.fuser.returncode == 127
        assert report.lsof.returncode == 127

    def test_fuser_alone_reports_holders(self) -> None:
        """A successful fuser listing counts even when lsof finds nothing."""
        with patch("homereap.operators.base.run_command") as mock_run:
            mock_run.side_effect = [
                CommandResult(stdout="", stderr=FUSER_TABLE, returncode=0),
                FileNotFoundError("lsof"),
            ]

            report = ProcessReaper().report_holders("/home/alice")

        assert report.any_holders is True

    def test_no_holders(self) -> None:
        """fuser exit 1 and an empty lsof listing mean no holders."""
        with patch("homereap.operators.base.run_command") as mock_run:
            mock_run.side_effect = [
                CommandResult(stdout="", stderr="", returncode=1),
                CommandResult(stdout="", stderr="", returncode=1),
            ]

            report = ProcessReaper().report_holders("/home/alice")

        assert report.any_holders is False

    def test_runs_in_dry_run(self) -> None:
        """Holder listings still run in dry-run mode."""
        with patch("homereap.operators.base.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout="", stderr="", returncode=1)

            ProcessReaper(dry_run=True).report_holders("/home/alice")

        assert mock_run.call_count == 2


class TestSignal:
    """Tests for ProcessReaper.signal."""

    @pytest.mark.parametrize(
        ("severity", "scope", "expected"),
        [
            (
                SignalSeverity.TERMINATE,
                HolderScope.WRITE,
                ["fuser", "-k", "-TERM", "-w", "-m", "-M", "/home/alice"],
            ),
            (
                SignalSeverity.KILL,
                HolderScope.ANY,
                ["fuser", "-k", "-KILL", "-m", "-M", "/home/alice"],
            ),
        ],
    )
    def test_command_line(
        self,
        severity: SignalSeverity,
        scope: HolderScope,
        expected: list[str],
    ) -> None:
        """Severity and scope map onto fuser options."""
        with patch("homereap.operators.base.run_command") as mock_run:
            mock_run.return_value = CommandResult(
                stdout=" 4242", stderr="/home/alice:", returncode=0
            )

            result = ProcessReaper().signal("/home/alice", severity, scope)

        assert result.success
        assert mock_run.call_args[0][0] == expected

    def test_no_match_is_success(self) -> None:
        """fuser finding nothing is not an error."""
        with patch("homereap.operators.base.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout="", stderr="", returncode=1)

            result = ProcessReaper().signal(
                "/home/alice", SignalSeverity.TERMINATE, HolderScope.WRITE
            )

        assert result.success is True

    def test_real_error_is_failure(self) -> None:
        """A fuser error other than 'no match' is reported as a failure."""
        with patch("homereap.operators.base.run_command") as mock_run:
            mock_run.return_value = CommandResult(
                stdout="",
                stderr="Specified filename /home/alice is not a mountpoint.",
                returncode=1,
            )

            result = ProcessReaper().signal("/home/alice", SignalSeverity.KILL, HolderScope.ANY)

        assert result.success is False

    def test_dry_run_does_not_signal(self) -> None:
        """Signals are not sent in dry-run mode."""
        with patch("homereap.operators.base.run_command") as mock_run:
            result = ProcessReaper(dry_run=True).signal(
                "/home/alice", SignalSeverity.KILL, HolderScope.ANY
            )

        assert result.success
        mock_run.assert_not_called()


class TestReportAccountProcesses:
    """Tests for ProcessReaper.report_account_processes."""

    def test_lists_processes(self) -> None:
        """Process lines are returned without the header."""
        output = "    PID STAT     ELAPSED COMMAND\n   4300 Ss         01:02 gpg-agent --daemon\n"
        with patch("homereap.operators.base.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout=output, stderr="", returncode=0)

            lines = ProcessReaper().report_account_processes("alice")

        assert len(lines) == 1
        assert "gpg-agent" in lines[0]
        assert mock_run.call_args[0][0][-2:] == ["-u", "alice"]

    def test_no_processes(self) -> None:
        """ps exiting 1 with only a header means no processes."""
        with patch("homereap.operators.base.run_command") as mock_run:
            mock_run.return_value = CommandResult(
                stdout="    PID STAT     ELAPSED COMMAND\n", stderr="", returncode=1
            )

            assert ProcessReaper().report_account_processes("alice") == []

    def test_failure_returns_empty(self) -> None:
        """A failing ps yields an empty listing instead of raising."""
        with patch("homereap.operators.base.run_command", side_effect=FileNotFoundError("ps")):
            assert ProcessReaper().report_account_processes("alice") == []
