"""Unit tests for Unmounter.

Tests for the unmount primitive and encryption key unload.
"""

from unittest.mock import patch

import pytest
from homereap.operators.unmount import Unmounter
from homereap.utils.shell import CommandResult

OK = CommandResult(stdout="", stderr="", returncode=0)


class TestUnmounter:
    """Tests for Unmounter class."""

    @pytest.fixture
    def unmounter(self) -> Unmounter:
        """Create Unmounter instance."""
        return Unmounter()

    def test_is_available(self, unmounter: Unmounter) -> None:
        """is_available requires both umount and zfs."""
        with patch("homereap.operators.unmount.command_exists", return_value=True):
            assert unmounter.is_available() is True
        with patch("homereap.operators.unmount.command_exists", side_effect=[True, False]):
            assert unmounter.is_available() is False

    @pytest.mark.parametrize(
        ("kwargs", "expected"),
        [
            ({"native": True}, ["zfs", "unmount", "pool/USERDATA/alice"]),
            ({"native": True, "force": True}, ["zfs", "unmount", "-f", "pool/USERDATA/alice"]),
        ],
    )
    def test_native_unmount(self, unmounter: Unmounter, kwargs: dict, expected: list) -> None:
        """Native unmounts go through zfs unmount."""
        with patch("homereap.operators.base.run_command") as mock_run:
            mock_run.return_value = OK

            unmounter.unmount("pool/USERDATA/alice", **kwargs)

        assert mock_run.call_args[0][0] == expected

    @pytest.mark.parametrize(
        ("kwargs", "expected"),
        [
            ({}, ["umount", "/home/alice"]),
            ({"force": True}, ["umount", "-f", "/home/alice"]),
            ({"recursive": True}, ["umount", "-R", "/home/alice"]),
            ({"recursive": True, "all_targets": True}, ["umount", "-R", "-A", "/home/alice"]),
            (
                {"recursive": True, "all_targets": True, "force": True},
                ["umount", "-f", "-R", "-A", "/home/alice"],
            ),
            (
                {"lazy": True, "force": True, "recursive": True},
                ["umount", "-l", "-f", "-R", "/home/alice"],
            ),
            ({"lazy": True, "force": True}, ["umount", "-l", "-f", "/home/alice"]),
        ],
    )
    def test_umount_flags(self, unmounter: Unmounter, kwargs: dict, expected: list) -> None:
        """Flags map onto umount options."""
        with patch("homereap.operators.base.run_command") as mock_run:
            mock_run.return_value = OK

            unmounter.unmount("/home/alice", **kwargs)

        assert mock_run.call_args[0][0] == expected

    def test_native_rejects_umount_options(self, unmounter: Unmounter) -> None:
        """zfs unmount cannot be combined with recursive or lazy."""
        with pytest.raises(ValueError, match="only the force option"):
            unmounter.unmount("pool/USERDATA/alice", native=True, lazy=True)

    def test_failure_is_returned(self, unmounter: Unmounter) -> None:
        """A busy target comes back as a failed result, not an exception."""
        with patch("homereap.operators.base.run_command") as mock_run:
            mock_run.return_value = CommandResult(
                stdout="", stderr="umount: /home/alice: target is busy.", returncode=32
            )

            result = unmounter.unmount("/home/alice")

        assert result.success is False
        assert "busy" in result.stderr

    def test_dry_run_does_not_execute(self) -> None:
        """Dry-run unmounts are logged only."""
        with patch("homereap.operators.base.run_command") as mock_run:
            result = Unmounter(dry_run=True).unmount("/home/alice", force=True)

        assert result.success
        mock_run.assert_not_called()

    def test_unload_key(self, unmounter: Unmounter) -> None:
        """unload_key runs zfs unload-key for the volume."""
        with patch("homereap.operators.base.run_command") as mock_run:
            mock_run.return_value = OK

            result = unmounter.unload_key("pool/USERDATA/alice")

        assert result.success
        assert mock_run.call_args[0][0] == ["zfs", "unload-key", "pool/USERDATA/alice"]

    def test_unload_key_failure(self, unmounter: Unmounter) -> None:
        """A busy dataset makes unload_key fail without raising."""
        with patch("homereap.operators.base.run_command") as mock_run:
            mock_run.return_value = CommandResult(
                stdout="", stderr="Key unload error: dataset is busy", returncode=255
            )

            result = unmounter.unload_key("pool/USERDATA/alice")

        assert result.success is False
