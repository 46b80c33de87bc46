"""Unmount and key-unload operator.

Wraps ``zfs unmount``, ``umount`` and ``zfs unload-key``.
"""

import logging

from homereap.operators.base import CommandOperator
from homereap.utils.shell import CommandResult, command_exists

logger = logging.getLogger(__name__)


class Unmounter(CommandOperator):
    """Operator for unmounting volumes and unloading their keys.

    Attributes:
        dry_run: If True, commands are logged and reported as successful
            without being executed.
    """

    def is_available(self) -> bool:
        """Check if umount and zfs are available."""
        return command_exists("umount") and command_exists("zfs")

    def unmount(
        self,
        target: str,
        *,
        native: bool = False,
        recursive: bool = False,
        all_targets: bool = False,
        force: bool = False,
        lazy: bool = False,
    ) -> CommandResult:
        """Unmount a volume or a mountpoint.

        Args:
            target: Volume identifier (native) or mountpoint path.
            native: Use the volume manager's own unmount (``zfs unmount``).
            recursive: Unmount submounts as well (``umount -R``).
            all_targets: Unmount every mountpoint of the filesystem (``umount -A``).
            force: Force the unmount.
            lazy: Detach now and clean up when no longer busy (``umount -l``).

        Returns:
            CommandResult of the unmount command.

        Raises:
            ValueError: If umount-only options are combined with ``native``.
        """
        if native:
            if recursive or all_targets or lazy:
                msg = "zfs unmount supports only the force option"
                raise ValueError(msg)
            args = ["zfs", "unmount"]
            if force:
                args.append("-f")
            args.append(target)
            return self._execute(args)

        args = ["umount"]
        if lazy:
            args.append("-l")
        if force:
            args.append("-f")
        if recursive:
            args.append("-R")
        if all_targets:
            args.append("-A")
        args.append(target)
        return self._execute(args)

    def unload_key(self, volume_id: str) -> CommandResult:
        """Remove a volume's encryption key from memory.

        Args:
            volume_id: Volume identifier.

        Returns:
            CommandResult of ``zfs unload-key``.
        """
        result = self._execute(["zfs", "unload-key", volume_id])
        if result.success:
            logger.info("Encryption key unloaded for %s", volume_id)
        else:
            logger.warning(
                "Could not unload encryption key for %s: %s",
                volume_id,
                result.stderr.strip() or f"exit status {result.returncode}",
            )
        return result
