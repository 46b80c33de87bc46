"""Home-directory owner lookup against the passwd database."""

import logging
import os
import pwd
from collections.abc import Callable, Sequence

from homereap.inspectors.base import OwnerResolver

logger = logging.getLogger(__name__)


class PasswdOwnerResolver(OwnerResolver):
    """Reverse-maps a home directory path to the account that owns it.

    Args:
        entries: Callable returning passwd entries; defaults to ``pwd.getpwall``.
    """

    def __init__(self, entries: Callable[[], Sequence[pwd.struct_passwd]] = pwd.getpwall) -> None:
        self._entries = entries

    def resolve_owner(self, mountpoint: str) -> str | None:
        """Return the first account whose home directory is ``mountpoint``."""
        wanted = os.path.normpath(mountpoint)
        for entry in self._entries():
            if entry.pw_dir and os.path.normpath(entry.pw_dir) == wanted:
                return entry.pw_name
        logger.debug("No passwd entry has home directory %s", mountpoint)
        return None
