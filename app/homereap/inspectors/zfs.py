"""ZFS mount inspector implementation.

Lists mounted datasets with ``zfs list``, reads dataset properties with
``zfs get`` and checks mountpoint paths against the kernel mount table.
"""

import logging
import os
import re
import subprocess
from pathlib import Path, PurePosixPath

from homereap.inspectors.base import InspectionError, MountInspector
from homereap.models.volume import MountEntry
from homereap.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)

_OCTAL_ESCAPE = re.compile(rb"\\([0-3][0-7]{2})")


def _unescape_mount_path(raw: bytes) -> bytes:
    """Decode the octal escapes the kernel uses in mount table paths."""
    return _OCTAL_ESCAPE.sub(lambda m: bytes([int(m.group(1), 8)]), raw)


def _is_below(path: str, root: str) -> bool:
    """Check if ``path`` lies strictly below ``root``."""
    candidate = PurePosixPath(os.path.normpath(path))
    base = PurePosixPath(os.path.normpath(root))
    return candidate != base and candidate.is_relative_to(base)


class ZfsMountInspector(MountInspector):
    """Mount inspector for ZFS datasets.

    Args:
        mounts_file: Kernel mount table used for path checks.
        timeout: Timeout in seconds for each ``zfs`` invocation.
    """

    def __init__(
        self,
        *,
        mounts_file: Path = Path("/proc/self/mounts"),
        timeout: float = 60.0,
    ) -> None:
        self._mounts_file = mounts_file
        self._timeout = timeout

    def is_available(self) -> bool:
        """Check if the zfs command is available."""
        return command_exists("zfs")

    def list_mounted(self, under: str) -> list[MountEntry]:
        """List mounted datasets below a mountpoint prefix.

        Args:
            under: Mountpoint prefix, e.g. ``/home``.

        Returns:
            Mount entries in ``zfs list`` order.

        Raises:
            InspectionError: If zfs is missing or ``zfs list`` fails.
        """
        if not self.is_available():
            msg = "zfs is not available on this system"
            raise InspectionError(msg)

        try:
            result = run_command(
                ["zfs", "list", "-H", "-t", "filesystem", "-o", "name,mountpoint,mounted"],
                timeout=self._timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            msg = f"zfs list could not be executed: {e}"
            raise InspectionError(msg) from e

        if not result.success:
            msg = f"zfs list failed: {result.stderr.strip() or 'unknown error'}"
            raise InspectionError(msg)

        entries: list[MountEntry] = []
        for line in result.stdout.splitlines():
            if not line.strip():
                continue
            parts = line.split("\t")
            if len(parts) != 3:
                logger.debug("Skipping malformed zfs list line: %r", line[:100])
                continue
            volume_id, mountpoint, mounted = (p.strip() for p in parts)
            if mounted != "yes" or not mountpoint.startswith("/"):
                continue
            if _is_below(mountpoint, under):
                entries.append(MountEntry(volume_id=volume_id, mountpoint=mountpoint))

        logger.debug("Found %d mounted volume(s) under %s", len(entries), under)
        return entries

    def get_property(self, volume_id: str, name: str) -> str | None:
        """Read a dataset property with ``zfs get``.

        Args:
            volume_id: Dataset name.
            name: Property name.

        Returns:
            Property value, or None if the lookup failed.
        """
        try:
            result = run_command(
                ["zfs", "get", "-H", "-o", "value", name, volume_id],
                timeout=self._timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning("Could not read %s of %s: %s", name, volume_id, e)
            return None

        if not result.success:
            logger.warning(
                "zfs get %s %s failed: %s",
                name,
                volume_id,
                result.stderr.strip() or f"exit status {result.returncode}",
            )
            return None

        value = result.stdout.strip()
        return value or None

    def is_mounted(self, target: str) -> bool:
        """Check if a dataset or a mountpoint path is mounted.

        Absolute paths are checked against the kernel mount table; anything
        else is treated as a dataset name and checked with the ``mounted``
        property.

        Args:
            target: Dataset name or absolute path.

        Returns:
            True if mounted.

        Raises:
            InspectionError: If the kernel mount table cannot be read.
        """
        if target.startswith("/"):
            return self._path_is_mounted(target)
        return self.get_property(target, "mounted") == "yes"

    def _path_is_mounted(self, path: str) -> bool:
        """Check a path against the kernel mount table.

        The table is compared as raw bytes: mountpoints are not guaranteed
        to be valid UTF-8.
        """
        wanted = os.path.normpath(os.fsencode(path))
        try:
            with open(self._mounts_file, "rb") as f:
                for line in f:
                    fields = line.split()
                    if len(fields) < 2:
                        continue
                    if os.path.normpath(_unescape_mount_path(fields[1])) == wanted:
                        return True
        except OSError as e:
            msg = f"Cannot read mount table {self._mounts_file}: {e}"
            raise InspectionError(msg) from e
        return False
